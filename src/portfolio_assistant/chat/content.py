"""Static portfolio content: canned answers, redirect pool, suggestions.

Loaded once at import and never mutated at runtime.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

ANSWERS: Mapping[str, str] = MappingProxyType({
    "aboutMe": (
        "I'm Emmanuella, a passionate frontend developer who loves creating engaging "
        "user interfaces and building beautiful web applications. I specialize in "
        "React and other modern web technologies."
    ),
    "projectDescription": (
        "This project is a portfolio that highlights my experience and skills as a "
        "frontend developer, showcasing my work and projects in web development."
    ),
    "techStack": (
        "I use modern technologies like Angular, React, NextJs, TypeScript, HTML5, "
        "CSS3, SCSS, and JavaScript. I also work with tools like Docker, GraphQL, and "
        "libraries like Framer Motion for animations."
    ),
    "favoriteLanguage": (
        "My favorite programming language is JavaScript because of its versatility "
        "and the vast ecosystem of libraries and frameworks like React and Node.js. "
        "I also enjoy working with TypeScript for its type safety and scalability."
    ),
    "portfolioWalkthrough": (
        "Sure! My portfolio is divided into several sections: 1) About Me, where I "
        "introduce myself and my skills; 2) Projects, where I showcase my work with "
        "details about the technologies used; 3) Contact, where you can reach out to "
        "me. Each project includes a description, technologies used, and a link to "
        "the live demo or GitHub repository."
    ),
    "reactExperience": (
        "I have extensive experience working with React, including building dynamic "
        "user interfaces, managing state with Redux, and optimizing performance using "
        "React.memo and useCallback."
    ),
    "backendExperience": (
        "While my primary focus is frontend development, I have experience working "
        "with backend technologies like Node.js, Express, and databases like MongoDB "
        "and Firebase."
    ),
    "designProcess": (
        "My design process starts with understanding user needs, creating wireframes "
        "and prototypes, and iterating based on feedback. I use tools like Figma and "
        "Adobe XD for design and collaboration."
    ),
    "accessibility": (
        "I prioritize accessibility by following WCAG guidelines, using semantic HTML, "
        "ARIA attributes, and testing with screen readers and accessibility tools like "
        "Lighthouse."
    ),
    "challengingProject": (
        "One challenging project involved building a real-time chat application with "
        "WebSockets. I had to optimize performance for high traffic and ensure "
        "seamless communication between users."
    ),
})

# Phrasing -> answer. Several phrasings may share one answer.
PREDEFINED_RESPONSES: Mapping[str, str] = MappingProxyType({
    "tell me about emmanuella": ANSWERS["aboutMe"],
    "about her": ANSWERS["aboutMe"],
    "who is emmanuella": ANSWERS["aboutMe"],
    "hi": "Hello! How can I help you today?",
    "hello": "Hi there! What can I do for you?",
    "hey": "Hey! What's on your mind?",
    "what’s this project about": ANSWERS["projectDescription"],
    "describe this project": ANSWERS["projectDescription"],
    "portfolio details": ANSWERS["projectDescription"],
    "what technologies does she use": ANSWERS["techStack"],
    "tech stack": ANSWERS["techStack"],
    "what’s your tech stack": ANSWERS["techStack"],
    "programming languages": ANSWERS["techStack"],
    "what’s your favorite programming language": ANSWERS["favoriteLanguage"],
    "favorite programming language": ANSWERS["favoriteLanguage"],
    "which language do you prefer": ANSWERS["favoriteLanguage"],
    "walk me through your portfolio": ANSWERS["portfolioWalkthrough"],
    "tell me about your portfolio": ANSWERS["portfolioWalkthrough"],
    "explain your portfolio": ANSWERS["portfolioWalkthrough"],
    "what’s your experience with react": ANSWERS["reactExperience"],
    "do you have experience with backend development": ANSWERS["backendExperience"],
    "what’s your design process": ANSWERS["designProcess"],
    "how do you handle accessibility in your projects": ANSWERS["accessibility"],
    "can you describe a challenging project you worked on": ANSWERS["challengingProject"],
})

FALLBACK_RESPONSES: Tuple[str, ...] = (
    "I'm here to chat about Emmanuella and programming. Ask me something related!",
    "That’s outside my expertise! But I can tell you about programming or Emmanuella’s work.",
    "I specialize in programming and Emmanuella-related topics. What would you like to know?",
    "I can answer questions about coding and Emmanuella. Need help with anything in that area?",
    "Hmm, I only respond to programming and Emmanuella-related queries. Try something else!",
)

SUGGESTED_QUESTIONS: Tuple[str, ...] = (
    "Tell me about Emmanuella",
    "What technologies does she use?",
    "Walk me through your portfolio",
    "Can you describe a challenging project you worked on?",
)

"""
Psychological domain catalogue.

The 39 domains tracked by the profiler, grouped into display categories.
Domain ids are the stable keys used by every store, signal and report.
"""

from typing import Dict, List, Tuple

DOMAIN_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "Core Personality (Big Five)": (
        "big_five_openness",
        "big_five_conscientiousness",
        "big_five_extraversion",
        "big_five_agreeableness",
        "big_five_neuroticism",
    ),
    "Dark Personality": (
        "dark_triad_narcissism",
        "dark_triad_machiavellianism",
        "dark_triad_psychopathy",
    ),
    "Emotional/Social Intelligence": (
        "emotional_empathy",
        "emotional_intelligence",
        "attachment_style",
        "love_languages",
        "communication_style",
    ),
    "Decision Making & Motivation": (
        "risk_tolerance",
        "decision_style",
        "time_orientation",
        "achievement_motivation",
        "self_efficacy",
        "locus_of_control",
        "growth_mindset",
    ),
    "Values & Wellbeing": (
        "personal_values",
        "interests",
        "life_satisfaction",
        "stress_coping",
        "social_support",
        "authenticity",
    ),
    "Cognitive/Learning": (
        "cognitive_abilities",
        "creativity",
        "learning_styles",
        "information_processing",
        "metacognition",
        "executive_functions",
    ),
    "Social/Cultural/Values": (
        "social_cognition",
        "political_ideology",
        "cultural_values",
        "moral_reasoning",
        "work_career_style",
    ),
    "Sensory/Aesthetic": (
        "sensory_processing",
        "aesthetic_preferences",
    ),
}

PSYCHOLOGICAL_DOMAINS: Tuple[str, ...] = tuple(
    domain for domains in DOMAIN_CATEGORIES.values() for domain in domains
)

DOMAIN_DISPLAY_NAMES: Dict[str, str] = {
    "big_five_openness": "Openness",
    "big_five_conscientiousness": "Conscientiousness",
    "big_five_extraversion": "Extraversion",
    "big_five_agreeableness": "Agreeableness",
    "big_five_neuroticism": "Neuroticism",
    "dark_triad_narcissism": "Narcissism",
    "dark_triad_machiavellianism": "Machiavellianism",
    "dark_triad_psychopathy": "Psychopathy",
    "emotional_empathy": "Empathy",
    "emotional_intelligence": "Emotional Intelligence",
    "attachment_style": "Attachment Style",
    "love_languages": "Love Languages",
    "communication_style": "Communication Style",
    "risk_tolerance": "Risk Tolerance",
    "decision_style": "Decision Style",
    "time_orientation": "Time Orientation",
    "achievement_motivation": "Achievement Motivation",
    "self_efficacy": "Self-Efficacy",
    "locus_of_control": "Locus of Control",
    "growth_mindset": "Growth Mindset",
    "personal_values": "Personal Values",
    "interests": "Interests",
    "life_satisfaction": "Life Satisfaction",
    "stress_coping": "Stress Coping",
    "social_support": "Social Support",
    "authenticity": "Authenticity",
    "cognitive_abilities": "Cognitive Abilities",
    "creativity": "Creativity",
    "learning_styles": "Learning Styles",
    "information_processing": "Information Processing",
    "metacognition": "Metacognition",
    "executive_functions": "Executive Functions",
    "social_cognition": "Social Cognition",
    "political_ideology": "Political Ideology",
    "cultural_values": "Cultural Values",
    "moral_reasoning": "Moral Reasoning",
    "work_career_style": "Work/Career Style",
    "sensory_processing": "Sensory Processing",
    "aesthetic_preferences": "Aesthetic Preferences",
}

_CATEGORY_BY_DOMAIN: Dict[str, str] = {
    domain: category
    for category, domains in DOMAIN_CATEGORIES.items()
    for domain in domains
}


def get_domain_category(domain_id: str) -> str:
    """Return the display category of a domain, or "Unknown"."""
    return _CATEGORY_BY_DOMAIN.get(domain_id, "Unknown")


def get_domain_display_name(domain_id: str) -> str:
    """Return a human-readable domain name, falling back to the id."""
    return DOMAIN_DISPLAY_NAMES.get(domain_id, domain_id)


def is_known_domain(domain_id: str) -> bool:
    return domain_id in _CATEGORY_BY_DOMAIN


def domains_in_category(category: str) -> List[str]:
    """List the domain ids of a category in canonical order."""
    return list(DOMAIN_CATEGORIES.get(category, ()))

"""
LIWC-style word categories.

Category word lists are matched against lowercased tokens. Entries with
a space are matched as consecutive token phrases.
"""

from typing import Dict, Tuple

WORD_CATEGORIES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "pronouns": {
        "i": ("i", "me", "my", "mine", "myself"),
        "we": ("we", "us", "our", "ours", "ourselves"),
        "you": ("you", "your", "yours", "yourself", "yourselves"),
    },
    "emotions": {
        "positive": (
            "happy", "joy", "love", "wonderful", "great", "amazing", "excellent",
            "good", "fantastic", "beautiful", "excited", "grateful", "thankful",
            "pleased", "delighted", "glad", "cheerful", "optimistic", "hopeful",
        ),
        "negative": (
            "sad", "angry", "hate", "terrible", "awful", "bad", "horrible",
            "upset", "frustrated", "annoyed", "disappointed", "worried", "scared",
            "fear", "anxious", "stressed", "depressed", "lonely", "hurt",
        ),
        "anxiety": (
            "worried", "nervous", "anxious", "stress", "panic", "fear", "scared",
            "tense", "uneasy", "overwhelmed", "dread", "apprehensive",
        ),
    },
    "cognitive": {
        "insight": (
            "think", "know", "consider", "understand", "realize", "believe",
            "feel", "sense", "thought", "idea", "concept", "notion",
        ),
        "causation": (
            "because", "cause", "effect", "hence", "therefore", "thus",
            "consequently", "result", "reason", "why", "leads", "creates",
        ),
        "tentative": (
            "maybe", "perhaps", "might", "possibly", "probably", "seems",
            "appears", "guess", "suppose", "wonder", "uncertain", "unclear",
        ),
    },
    "social": {
        "family": (
            "mom", "dad", "mother", "father", "parent", "parents", "sister",
            "brother", "family", "son", "daughter", "child", "children",
            "grandma", "grandpa", "grandmother", "grandfather", "aunt", "uncle",
        ),
        "friends": (
            "friend", "friends", "buddy", "pal", "companion", "mate",
            "colleague", "coworker", "neighbor", "acquaintance",
        ),
        "humans": (
            "person", "people", "human", "humans", "someone", "anyone",
            "everyone", "nobody", "somebody", "individual", "group", "team",
        ),
    },
}

COMPLEX_WORDS: Tuple[str, ...] = (
    "notwithstanding", "nevertheless", "consequently", "furthermore",
    "subsequently", "alternatively", "approximately", "simultaneously",
    "predominantly", "fundamentally", "comprehensive", "sophisticated",
)

# Supplementary markers for domains beyond the Big Five
MARKER_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "certainty": (
        "always", "never", "definitely", "certainly", "absolutely", "completely",
        "totally", "surely", "undoubtedly", "clearly", "obviously", "evidently",
        "exactly", "precisely", "for sure", "without doubt", "certain",
    ),
    "differentiation": (
        "but", "except", "however", "although", "though", "unless", "instead",
        "otherwise", "alternatively", "whereas", "unlike", "nevertheless",
        "nonetheless", "other than",
    ),
    "growth_language": (
        "learn", "improve", "develop", "grow", "progress", "practice", "effort",
        "try", "challenge", "mistake", "feedback", "potential", "opportunity",
        "yet", "becoming", "evolve", "adapt", "persist", "persevere", "hard work",
    ),
    "fixed_language": (
        "talent", "gifted", "natural", "born", "innate", "genius",
        "impossible", "limit", "limited", "stuck", "fixed", "permanent",
        "incapable", "unable",
    ),
    "effort_attribution": (
        "effort", "practice", "study", "prepare", "train", "dedication",
        "commitment", "persistence", "perseverance", "determination", "discipline",
    ),
    "ability_attribution": (
        "talent", "gifted", "innate", "smart", "intelligent", "brilliant",
        "talented", "aptitude",
    ),
    "planning": (
        "plan", "strategy", "approach", "method", "prepare", "organize", "goal",
        "objective", "step", "process", "schedule", "timeline", "outline",
        "framework", "structure",
    ),
    "monitoring": (
        "check", "verify", "track", "monitor", "assess", "measure", "observe",
        "notice", "attention", "aware", "conscious", "mindful",
    ),
    "evaluation": (
        "evaluate", "judge", "review", "analyze", "reflect", "examine",
        "critique", "compare", "weigh", "conclude",
    ),
    "self_correction": (
        "correct", "fix", "adjust", "revise", "modify", "refine", "update",
        "rethink", "reconsider", "redo",
    ),
    "novelty": (
        "new", "novel", "original", "unique", "innovative", "fresh", "different",
        "unprecedented", "groundbreaking", "unconventional", "unusual",
    ),
    "imagination": (
        "imagine", "envision", "dream", "conceive", "visualize", "fantasy",
        "creative", "creativity", "artistic", "imaginative", "inspired",
    ),
    "innovation": (
        "innovate", "innovation", "invent", "invention", "create", "creation",
        "design", "discover", "explore", "experiment", "breakthrough", "transform",
    ),
    "achievement": (
        "achieve", "accomplish", "success", "win", "goal", "ambitious", "strive",
        "excel", "master", "best", "improve", "progress", "advance", "succeed",
        "complete", "finish", "earn",
    ),
    "risk": (
        "risk", "danger", "gamble", "bet", "chance", "dare", "venture",
        "adventure", "unpredictable", "volatile", "risky", "dangerous",
    ),
    "affiliation": (
        "together", "share", "join", "belong", "connect", "bond", "unite",
        "collaborate", "cooperate", "support", "community", "friendship",
    ),
    "past_focus": (
        "was", "were", "had", "ago", "yesterday", "previously", "earlier",
        "former", "past", "remember", "recall", "nostalgia", "regret",
        "used to", "back then", "growing up",
    ),
    "future_focus": (
        "will", "shall", "gonna", "tomorrow", "soon", "later", "eventually",
        "someday", "future", "upcoming", "next", "plan", "intend", "anticipate",
        "aspire", "going to",
    ),
}

# Marker-scored domains. "density" domains scale marker frequency; "balance"
# domains compare positive against negative markers.
DOMAIN_MARKERS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "cognitive_abilities": {"density": ("certainty", "differentiation")},
    "metacognition": {
        "density": ("planning", "monitoring", "evaluation", "self_correction"),
    },
    "creativity": {"density": ("novelty", "imagination", "innovation")},
    "achievement_motivation": {"density": ("achievement",)},
    "risk_tolerance": {"density": ("risk",)},
    "social_support": {"density": ("affiliation",)},
    "growth_mindset": {
        "positive": ("growth_language", "effort_attribution"),
        "negative": ("fixed_language", "ability_attribution"),
    },
    "time_orientation": {
        "positive": ("future_focus",),
        "negative": ("past_focus",),
    },
}

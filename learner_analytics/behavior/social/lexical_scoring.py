"""
Lexical scoring of dialogue choices

Keyword heuristics for empathy, assertiveness, warmth and logic, plus the
interaction-type and emotional-context classifiers.

Keywords match at a word start ("help" matches "helping", "but" does not
match "about"), case-insensitively.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional
import re

from learner_analytics.behavior.stats import clamp01


@dataclass(frozen=True)
class DialogueChoice:
    """Dialogue option picked by the player"""
    text: str
    relationship_change: float = 0.0
    character_id: Optional[str] = None
    choice_id: Optional[str] = None


EMPATHY_WORDS = (
    "understand", "feel", "sorry", "care", "support",
    "help", "comfort", "concern", "worry", "appreciate",
)
WARMTH_WORDS = (
    "thank", "appreciate", "glad", "happy", "wonderful",
    "great", "excellent", "proud", "love", "enjoy",
)
LOGIC_WORDS = (
    "think", "reason", "because", "therefore", "analyze",
    "consider", "evaluate", "conclude", "evidence", "fact",
)

# Checked in order; first match wins
INTERACTION_TYPE_KEYWORDS = [
    ("supportive", ("help", "support")),
    ("inquisitive", ("question", "curious")),
    ("agreeable", ("agree", "understand")),
    ("challenging", ("disagree", "but")),
    ("educational", ("teach", "explain")),
    ("humorous", ("joke", "funny")),
]

EMPATHY_PER_WORD = 0.2
WARMTH_BASE = 0.3
WARMTH_PER_WORD = 0.15
LOGIC_PER_WORD = 0.2
ASSERTIVENESS_BASE = 0.5


@lru_cache(maxsize=256)
def _word_pattern(word: str) -> "re.Pattern[str]":
    return re.compile(r"\b" + re.escape(word))


def contains_word(text: str, word: str) -> bool:
    return _word_pattern(word).search(text) is not None


def count_words(text: str, words: Iterable[str]) -> int:
    return sum(1 for w in words if contains_word(text, w))


def measure_empathy(choice: DialogueChoice) -> float:
    text = choice.text.lower()
    score = EMPATHY_PER_WORD * count_words(text, EMPATHY_WORDS)
    # A positive relationship change reads as empathy
    if choice.relationship_change > 0:
        score += choice.relationship_change
    return clamp01(score)


def measure_assertiveness(choice: DialogueChoice) -> float:
    text = choice.text.lower().strip()
    score = ASSERTIVENESS_BASE

    if text.startswith("i think") or text.startswith("i believe"):
        score += 0.3
    if contains_word(text, "should") or contains_word(text, "must"):
        score += 0.2
    if contains_word(text, "definitely") or contains_word(text, "certainly"):
        score += 0.2

    if contains_word(text, "maybe") or contains_word(text, "perhaps"):
        score -= 0.2
    if contains_word(text, "sorry") and "feel sorry for" not in text:
        score -= 0.2
    if text.endswith("?"):
        score -= 0.1

    return clamp01(score)


def measure_warmth(choice: DialogueChoice) -> float:
    text = choice.text.lower()
    return clamp01(WARMTH_BASE + WARMTH_PER_WORD * count_words(text, WARMTH_WORDS))


def measure_logic(choice: DialogueChoice) -> float:
    text = choice.text.lower()
    score = LOGIC_PER_WORD * count_words(text, LOGIC_WORDS)

    # Structured responses
    if contains_word(text, "first") and contains_word(text, "second"):
        score += 0.3
    if contains_word(text, "if") and contains_word(text, "then"):
        score += 0.2

    return clamp01(score)


def classify_interaction_type(choice: DialogueChoice) -> str:
    text = choice.text.lower()
    for interaction_type, keywords in INTERACTION_TYPE_KEYWORDS:
        if any(contains_word(text, k) for k in keywords):
            return interaction_type
    return "neutral"


def classify_emotional_context(
    choice: DialogueChoice,
    empathy: float,
    logic: float,
    empathy_threshold: float = 0.7,
) -> str:
    text = choice.text
    if empathy > logic and empathy > empathy_threshold:
        return "emotionally_supportive"
    if logic > empathy and logic > 0.7:
        return "analytically_focused"
    if "!" in text or contains_word(text.lower(), "excited"):
        return "enthusiastic"
    if text.count("?") > 1:
        return "highly_curious"
    return "balanced"

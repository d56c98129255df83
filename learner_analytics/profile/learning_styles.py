"""
Learning-style dimensions (multiple-intelligences model) and session scalars
"""
from enum import Enum


class LearningStyle(str, Enum):
    """The eight learning-style weights, in tie-break order"""
    VISUAL_SPATIAL = "visual_spatial"
    VERBAL_LINGUISTIC = "verbal_linguistic"
    LOGICAL_MATHEMATICAL = "logical_mathematical"
    KINESTHETIC = "kinesthetic"
    MUSICAL = "musical"
    INTERPERSONAL = "interpersonal"
    INTRAPERSONAL = "intrapersonal"
    NATURALIST = "naturalist"

    @property
    def display_name(self) -> str:
        return STYLE_DISPLAY_NAMES[self]


STYLE_DISPLAY_NAMES = {
    LearningStyle.VISUAL_SPATIAL: "Visual-Spatial",
    LearningStyle.VERBAL_LINGUISTIC: "Verbal-Linguistic",
    LearningStyle.LOGICAL_MATHEMATICAL: "Logical-Mathematical",
    LearningStyle.KINESTHETIC: "Kinesthetic",
    LearningStyle.MUSICAL: "Musical",
    LearningStyle.INTERPERSONAL: "Interpersonal",
    LearningStyle.INTRAPERSONAL: "Intrapersonal",
    LearningStyle.NATURALIST: "Naturalist",
}


class ProfileScalar(str, Enum):
    """Session scalars, each independently clamped to [0, 1]"""
    ENGAGEMENT = "engagement"
    FRUSTRATION = "frustration"
    CONFIDENCE = "confidence"
    CURIOSITY = "curiosity"
    FOCUS = "focus"

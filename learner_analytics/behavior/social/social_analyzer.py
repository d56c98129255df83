"""
Social Analyzer - Interpersonal Behaviour from Dialogue Choices

Research alignment:
- Emotional intelligence: empathy and warmth markers in chosen responses
- Social confidence: response latency, self-initiation and assertiveness
- Interpersonal learning preference (multiple intelligences)

Per dialogue choice:
1. Score empathy, assertiveness, warmth and logic
2. Classify interaction type, emotional context and outcome
3. Update the relationship metrics for the character

Every 5th interaction (once 10 exist) aggregate patterns are recomputed over
the last 20 interactions. The emotional state is smoothed on every periodic
tick (default 2s) from the last 10 interactions.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import math
import time
import logging

from learner_analytics.behavior.events import BehaviorEventKind, RollingWindow
from learner_analytics.behavior.social.lexical_scoring import (
    DialogueChoice,
    classify_emotional_context,
    classify_interaction_type,
    measure_assertiveness,
    measure_empathy,
    measure_logic,
    measure_warmth,
)
from learner_analytics.behavior.stats import clamp01, lerp, population_variance, safe_mean, safe_ratio
from learner_analytics.core.config import settings
from learner_analytics.profile import LearnerProfileTracker, LearningStyle

logger = logging.getLogger(__name__)


@dataclass
class SocialInteraction:
    character_id: str
    interaction_type: str
    timestamp: float
    response_time: float
    emotional_context: str
    markers: Dict[str, float]
    initiated_by_player: bool
    outcome: str = "neutral_exchange"

    def marker(self, name: str, default: float = 0.0) -> float:
        return self.markers.get(name, default)

    @property
    def is_positive(self) -> bool:
        return "positive" in self.outcome or "strengthened" in self.outcome


@dataclass
class RelationshipMetrics:
    character_id: str
    trust_level: float = 0.0
    rapport_level: float = 0.0
    interaction_count: int = 0
    average_response_time: float = 0.0
    emotional_responses: Dict[str, int] = field(default_factory=dict)
    positive_interaction_ratio: float = 0.0
    last_interaction_time: Optional[float] = None


@dataclass
class EmotionalState:
    current_mood: float = 0.0  # -1 (negative) to 1 (positive)
    emotional_stability: float = 0.5
    social_energy: float = 0.7
    empathy_level: float = 0.3
    assertiveness: float = 0.5


@dataclass
class SocialPatterns:
    social_confidence: float = 0.0
    empathy_score: float = 0.0
    collaboration_score: float = 0.0
    leadership_score: float = 0.0
    communication_style: str = "balanced_communicator"
    shows_emotional_awareness: bool = False
    prefers_group_interaction: bool = False


class SocialAnalyzer:
    """
    Dialogue-choice analyzer feeding interpersonal signals into the profile
    """

    THRESHOLDS = {
        "quick_response": 2.0,        # seconds
        "thoughtful_response": 5.0,   # seconds
        "empathy_indicator": 0.7,
        "bond_markers": 1.2,          # empathy + warmth
        "leadership_assertiveness": 0.8,
        "leadership_logic": 0.6,
        "appropriate_empathy": 0.6,
        "awareness_contexts": 3,
        "awareness_ratio": 0.6,
        "group_variance": 5.0,
        "group_min_relationships": 3,
        "strong_trait": 0.7,
    }

    HISTORY_SIZE = 50
    PATTERN_EVERY = 5
    PATTERN_MIN_INTERACTIONS = 10
    PATTERN_WINDOW = 20
    EMOTION_WINDOW = 10

    INTERPERSONAL_DELTA = 0.002
    LOGIC_STYLE_DELTA = 0.001

    def __init__(
        self,
        tracker: LearnerProfileTracker,
        update_interval: Optional[float] = None,
        history_size: int = HISTORY_SIZE,
        custom_thresholds: Optional[Dict[str, float]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.tracker = tracker
        self.update_interval = update_interval or settings.SOCIAL_UPDATE_INTERVAL
        self.history_size = history_size
        self.thresholds = {**self.THRESHOLDS, **(custom_thresholds or {})}
        self._clock = clock or time.monotonic
        self.reset()

    def reset(self) -> None:
        self.history: RollingWindow[SocialInteraction] = RollingWindow(self.history_size)
        self.relationships: Dict[str, RelationshipMetrics] = {}
        self.emotional_state = EmotionalState()
        self.patterns = SocialPatterns()
        self.total_interactions = 0
        self._response_time_total = 0.0
        self._reported_traits: Dict[str, bool] = {}

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def record_dialogue_choice(
        self,
        character_id: str,
        choice: DialogueChoice,
        response_time: float,
        initiated_by_player: bool = True,
        timestamp: Optional[float] = None,
    ) -> SocialInteraction:
        """
        Analyze one dialogue choice

        Args:
            character_id: Character the player is talking to
            choice: The chosen dialogue option
            response_time: Seconds the player took to choose (negative clamped to 0)
            initiated_by_player: Whether the player opened the exchange
            timestamp: Event time (defaults to the analyzer clock)
        """
        if not math.isfinite(response_time) or response_time < 0:
            response_time = 0.0
        now = self._clock() if timestamp is None else timestamp

        empathy = measure_empathy(choice)
        logic = measure_logic(choice)
        interaction = SocialInteraction(
            character_id=character_id,
            interaction_type=classify_interaction_type(choice),
            timestamp=now,
            response_time=response_time,
            emotional_context=classify_emotional_context(
                choice, empathy, logic, self.thresholds["empathy_indicator"]
            ),
            markers={
                "empathy": empathy,
                "assertiveness": measure_assertiveness(choice),
                "warmth": measure_warmth(choice),
                "logic": logic,
            },
            initiated_by_player=initiated_by_player,
        )
        interaction.outcome = self.determine_outcome(interaction)

        self.history.append(interaction)
        self.total_interactions += 1
        self._response_time_total += response_time
        self._update_relationship(interaction)

        self.tracker.adjust_weight(LearningStyle.INTERPERSONAL, self.INTERPERSONAL_DELTA)
        if logic > self.thresholds["leadership_logic"]:
            self.tracker.adjust_weight(LearningStyle.LOGICAL_MATHEMATICAL, self.LOGIC_STYLE_DELTA)

        self.tracker.record_event(
            BehaviorEventKind.SOCIAL_INTERACTION,
            {
                "character_id": character_id,
                "interaction_type": interaction.interaction_type,
                "response_time": response_time,
                "emotional_context": interaction.emotional_context,
                "empathy_level": empathy,
                "assertiveness": interaction.marker("assertiveness"),
                "warmth": interaction.marker("warmth"),
                "logical_approach": logic,
                "outcome": interaction.outcome,
                "shows_quick_social_processing": response_time < self.thresholds["quick_response"],
                "shows_thoughtful_consideration": response_time > self.thresholds["thoughtful_response"],
            },
            source="social_analyzer",
        )

        if self.total_interactions % self.PATTERN_EVERY == 0:
            self.analyze_patterns()

        return interaction

    def determine_outcome(self, interaction: SocialInteraction) -> str:
        if interaction.marker("empathy") + interaction.marker("warmth") > self.thresholds["bond_markers"]:
            return "strengthened_bond"
        if (
            interaction.marker("assertiveness") > self.thresholds["leadership_assertiveness"]
            and interaction.marker("logic") > self.thresholds["leadership_logic"]
        ):
            return "established_leadership"
        if interaction.response_time < self.thresholds["quick_response"]:
            return "confident_interaction"
        if interaction.response_time > self.thresholds["thoughtful_response"]:
            return "thoughtful_exchange"
        return "neutral_exchange"

    def _update_relationship(self, interaction: SocialInteraction) -> RelationshipMetrics:
        metrics = self.relationships.get(interaction.character_id)
        if metrics is None:
            metrics = RelationshipMetrics(character_id=interaction.character_id)
            self.relationships[interaction.character_id] = metrics

        metrics.interaction_count += 1
        n = metrics.interaction_count
        metrics.average_response_time = (metrics.average_response_time * (n - 1) + interaction.response_time) / n
        metrics.last_interaction_time = interaction.timestamp

        context = interaction.emotional_context
        metrics.emotional_responses[context] = metrics.emotional_responses.get(context, 0) + 1

        if interaction.is_positive:
            metrics.trust_level = min(1.0, metrics.trust_level + 0.1)
            metrics.rapport_level = min(1.0, metrics.rapport_level + 0.1)

        positive = sum(
            count for ctx, count in metrics.emotional_responses.items()
            if "supportive" in ctx or "enthusiastic" in ctx
        )
        metrics.positive_interaction_ratio = positive / n
        return metrics

    def on_relationship_changed(self, character_id: str, new_value: float) -> None:
        """Host hook: an external relationship system set the trust level"""
        metrics = self.relationships.get(character_id)
        if metrics is not None and math.isfinite(new_value):
            metrics.trust_level = clamp01(new_value)

    # ------------------------------------------------------------------
    # Aggregate patterns
    # ------------------------------------------------------------------

    def analyze_patterns(self) -> Optional[SocialPatterns]:
        """Recompute aggregate patterns over the last 20 interactions"""
        if len(self.history) < self.PATTERN_MIN_INTERACTIONS:
            return None

        recent = self.history.latest(self.PATTERN_WINDOW)
        patterns = self.patterns
        patterns.social_confidence = self._social_confidence(recent)
        patterns.empathy_score = safe_mean(i.marker("empathy") for i in recent)
        patterns.communication_style = self._communication_style(recent)
        patterns.shows_emotional_awareness = self._emotional_awareness(recent)
        patterns.prefers_group_interaction = self._group_preference()
        patterns.collaboration_score = self._collaboration(recent)
        patterns.leadership_score = self._leadership(recent)

        self.tracker.record_event(
            BehaviorEventKind.SOCIAL_INTERACTION,
            {
                "event": "social_pattern_analysis",
                "social_confidence_score": patterns.social_confidence,
                "empathy_score": patterns.empathy_score,
                "collaboration_score": patterns.collaboration_score,
                "leadership_score": patterns.leadership_score,
                "dominant_communication_style": patterns.communication_style,
                "shows_emotional_awareness": patterns.shows_emotional_awareness,
                "prefers_group_interaction": patterns.prefers_group_interaction,
            },
            source="social_analyzer",
        )
        self._emit_trait_insights()
        return patterns

    def _quick_ratio(self, interactions: List[SocialInteraction]) -> float:
        quick = sum(1 for i in interactions if i.response_time < self.thresholds["quick_response"])
        return safe_ratio(quick, len(interactions))

    def _type_ratio(self, interactions: List[SocialInteraction], interaction_type: str) -> float:
        return safe_ratio(sum(1 for i in interactions if i.interaction_type == interaction_type), len(interactions))

    def _social_confidence(self, interactions: List[SocialInteraction]) -> float:
        initiated = safe_ratio(sum(1 for i in interactions if i.initiated_by_player), len(interactions))
        assertiveness = safe_mean((i.marker("assertiveness", 0.5) for i in interactions), default=0.5)
        return (self._quick_ratio(interactions) + initiated + assertiveness) / 3

    def _communication_style(self, interactions: List[SocialInteraction]) -> str:
        counts = Counter(i.interaction_type for i in interactions)
        total = len(interactions)
        if counts["supportive"] > total * 0.4:
            return "nurturing_supportive"
        if counts["inquisitive"] > total * 0.4:
            return "curious_learner"
        if counts["challenging"] > total * 0.3:
            return "analytical_challenger"
        if counts["educational"] > total * 0.3:
            return "teacher_mentor"
        return "balanced_communicator"

    def _emotional_awareness(self, interactions: List[SocialInteraction]) -> bool:
        contexts = len({i.emotional_context for i in interactions})
        appropriate = sum(
            1 for i in interactions
            if "supportive" in i.emotional_context and i.marker("empathy") > self.thresholds["appropriate_empathy"]
        )
        return (
            contexts > self.thresholds["awareness_contexts"]
            and safe_ratio(appropriate, len(interactions)) >= self.thresholds["awareness_ratio"]
        )

    def _group_preference(self) -> bool:
        if len(self.relationships) < self.thresholds["group_min_relationships"]:
            return False
        counts = [float(r.interaction_count) for r in self.relationships.values()]
        return population_variance(counts) < self.thresholds["group_variance"]

    def _collaboration(self, interactions: List[SocialInteraction]) -> float:
        positive = safe_ratio(sum(1 for i in interactions if i.is_positive), len(interactions))
        return (
            self._type_ratio(interactions, "supportive")
            + self._type_ratio(interactions, "agreeable")
            + positive
        ) / 3

    def _leadership(self, interactions: List[SocialInteraction]) -> float:
        assertiveness = safe_mean((i.marker("assertiveness", 0.5) for i in interactions), default=0.5)
        return (assertiveness + self._type_ratio(interactions, "educational") + self._quick_ratio(interactions)) / 3

    def _emit_trait_insights(self) -> None:
        """Emit each trait insight when its condition first turns true"""
        strong = self.thresholds["strong_trait"]
        traits = [
            ("high_empathy", self.patterns.empathy_score > strong,
             "Player demonstrates high emotional intelligence", 0.8),
            ("leadership_potential", self.patterns.leadership_score > strong,
             "Player shows natural leadership tendencies", 0.8),
            ("emotional_awareness", self.patterns.shows_emotional_awareness,
             "Player demonstrates understanding of emotional nuances", 0.75),
        ]
        for insight_type, active, description, significance in traits:
            if active and not self._reported_traits.get(insight_type, False):
                self.tracker.generate_insight(insight_type, description, significance)
            self._reported_traits[insight_type] = active

    # ------------------------------------------------------------------
    # Periodic update
    # ------------------------------------------------------------------

    def tick(self) -> EmotionalState:
        """Smooth the emotional state from the last 10 interactions"""
        recent = self.history.latest(self.EMOTION_WINDOW)
        if not recent:
            return self.emotional_state

        state = self.emotional_state
        positive = safe_ratio(sum(1 for i in recent if i.is_positive), len(recent))
        state.current_mood = lerp(state.current_mood, positive * 2 - 1, 0.3)
        state.emotional_stability = lerp(state.emotional_stability, 1 - self._emotional_variance(recent), 0.2)
        state.social_energy = lerp(state.social_energy, len(recent) / self.EMOTION_WINDOW, 0.2)
        state.empathy_level = lerp(state.empathy_level, self.patterns.empathy_score, 0.3)
        state.assertiveness = lerp(
            state.assertiveness,
            safe_mean((i.marker("assertiveness", 0.5) for i in recent), default=0.5),
            0.2,
        )
        return state

    @staticmethod
    def _emotional_variance(interactions: List[SocialInteraction]) -> float:
        if len(interactions) < 2:
            return 0.0
        moods = [i.marker("warmth") - i.marker("assertiveness", 0.5) + 0.5 for i in interactions]
        return population_variance(moods)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_average_response_time(self) -> float:
        return safe_ratio(self._response_time_total, self.total_interactions)

    def get_relationship_diversity(self) -> float:
        """1.0 when interactions are spread evenly across characters"""
        if not self.relationships:
            return 0.0
        counts = [r.interaction_count for r in self.relationships.values()]
        expected = sum(counts) / len(counts)
        if expected == 0:
            return 0.0
        diversity = sum(1 - abs(c - expected) / expected for c in counts)
        return diversity / len(counts)

    def get_relationship(self, character_id: str) -> Optional[RelationshipMetrics]:
        return self.relationships.get(character_id)

    def get_social_metrics(self) -> Dict[str, float]:
        return {
            "social_confidence": self.patterns.social_confidence,
            "empathy_level": self.patterns.empathy_score,
            "collaboration_score": self.patterns.collaboration_score,
            "leadership_score": self.patterns.leadership_score,
            "emotional_stability": self.emotional_state.emotional_stability,
            "social_energy": self.emotional_state.social_energy,
            "average_response_time": self.get_average_response_time(),
            "relationship_diversity": self.get_relationship_diversity(),
        }

    def get_dominant_social_style(self) -> str:
        p = self.patterns
        strong = self.thresholds["strong_trait"]
        if p.empathy_score > strong and p.shows_emotional_awareness:
            return "empathetic_connector"
        if p.leadership_score > strong and p.social_confidence > strong:
            return "natural_leader"
        if p.collaboration_score > strong and p.prefers_group_interaction:
            return "collaborative_learner"
        if "curious" in p.communication_style:
            return "social_explorer"
        if "analytical" in p.communication_style:
            return "analytical_communicator"
        return "balanced_social_learner"

    def get_social_analysis(self) -> Dict[str, object]:
        """Report map for the detailed session report"""
        return {
            "metrics": self.get_social_metrics(),
            "dominant_social_style": self.get_dominant_social_style(),
            "communication_style": self.patterns.communication_style,
            "shows_emotional_awareness": self.patterns.shows_emotional_awareness,
            "prefers_group_interaction": self.patterns.prefers_group_interaction,
            "total_interactions": self.total_interactions,
            "relationships": {
                cid: {
                    "trust_level": r.trust_level,
                    "rapport_level": r.rapport_level,
                    "interaction_count": r.interaction_count,
                    "average_response_time": r.average_response_time,
                    "positive_interaction_ratio": r.positive_interaction_ratio,
                }
                for cid, r in self.relationships.items()
            },
            "emotional_state": {
                "current_mood": self.emotional_state.current_mood,
                "emotional_stability": self.emotional_state.emotional_stability,
                "social_energy": self.emotional_state.social_energy,
                "empathy_level": self.emotional_state.empathy_level,
                "assertiveness": self.emotional_state.assertiveness,
            },
        }

"""
Root pytest configuration and shared fixtures.

Provides a deterministic clock and a tracker wired to it so analyzer tests
never depend on wall-clock time.
"""

import pytest

from learner_analytics.profile import LearnerProfileTracker


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: unit tests for isolated components"
    )
    config.addinivalue_line(
        "markers", "integration: full session pipeline tests"
    )


# ============================================================================
# Time
# ============================================================================

class FakeClock:
    """Manually advanced seconds source"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock starting at t=1000s."""
    return FakeClock()


# ============================================================================
# Profile
# ============================================================================

@pytest.fixture
def tracker(clock) -> LearnerProfileTracker:
    """Enabled tracker on the fake clock."""
    return LearnerProfileTracker(enabled=True, clock=clock)


@pytest.fixture
def disabled_tracker(clock) -> LearnerProfileTracker:
    """Tracker with analytics switched off."""
    return LearnerProfileTracker(enabled=False, clock=clock)

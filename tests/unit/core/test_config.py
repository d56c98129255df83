"""
Tests for analytics configuration
"""
import pytest
import os
from unittest.mock import patch


class TestSettings:
    """Tests for Settings configuration class"""

    def test_default_values(self):
        """Test default configuration values"""
        from learner_analytics.core.config import Settings

        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

            assert settings.APP_NAME == "Learner Analytics"
            assert settings.APP_VERSION == "1.0.0"
            assert settings.ANALYTICS_ENABLED is True

    def test_tick_cadence_defaults(self):
        """Test periodic update intervals"""
        from learner_analytics.core.config import Settings

        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

            assert settings.GAZE_POLL_INTERVAL == pytest.approx(0.1)
            assert settings.MOVEMENT_SAMPLE_INTERVAL == pytest.approx(0.5)
            assert settings.COGNITIVE_UPDATE_INTERVAL == pytest.approx(1.0)
            assert settings.SOCIAL_UPDATE_INTERVAL == pytest.approx(2.0)
            assert settings.REPORT_EVERY_N_TICKS == 10

    def test_history_defaults(self):
        """Test bounded history sizes"""
        from learner_analytics.core.config import Settings

        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

            assert settings.INSIGHT_HISTORY_SIZE == 100
            assert settings.EVENT_HISTORY_SIZE == 500
            assert settings.MAX_PATH_POINTS == 1000
            assert settings.FOCUS_THRESHOLD_SECONDS == pytest.approx(2.0)

    def test_environment_override(self):
        """Environment variables override defaults"""
        from learner_analytics.core.config import Settings

        with patch.dict(os.environ, {"GAZE_POLL_INTERVAL": "0.25", "ANALYTICS_ENABLED": "false"}):
            settings = Settings()

            assert settings.GAZE_POLL_INTERVAL == pytest.approx(0.25)
            assert settings.ANALYTICS_ENABLED is False

    def test_settings_singleton_exists(self):
        """Test global settings instance exists"""
        from learner_analytics.core.config import settings

        assert settings is not None
        assert hasattr(settings, "APP_NAME")


class TestExceptions:
    """Tests for the exception hierarchy"""

    def test_profile_invariant_error_is_analytics_error(self):
        """ProfileInvariantError can be caught as AnalyticsError"""
        from learner_analytics.core.exceptions import AnalyticsError, ProfileInvariantError

        with pytest.raises(AnalyticsError):
            raise ProfileInvariantError("weights")

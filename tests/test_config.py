"""
Unit tests for config module
Tests environment overrides, tables, validation and logging setup
"""
import importlib
import os
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vintalyze import config


# =========================
# Configuration Tests
# =========================
@pytest.mark.unit
class TestConfigLoading:
    """Test defaults and environment overrides"""

    def test_defaults(self):
        assert config.PLATFORM_NAME == "Vinted"
        assert config.MAX_INPUT_CHARS == 500_000
        assert config.SALES_CONVENTION == "point"
        assert config.TIMELINE_MODE == "adaptive"
        assert config.TRAILING_WINDOW_MONTHS == 12

    def test_env_overrides(self):
        """Test VINTALYZE_* variables are picked up on load"""
        env = {
            "VINTALYZE_PLATFORM_NAME": "Depop",
            "VINTALYZE_SALES_CONVENTION": "band",
            "VINTALYZE_FALLBACK_LANGUAGE": "fr",
        }
        try:
            with patch.dict(os.environ, env):
                importlib.reload(config)
                assert config.PLATFORM_NAME == "Depop"
                assert config.SALES_CONVENTION == "band"
                assert config.FALLBACK_LANGUAGE == "fr"
        finally:
            importlib.reload(config)

        assert config.PLATFORM_NAME == "Vinted"


@pytest.mark.unit
class TestConfigTables:
    """Test score weights and language tables"""

    def test_score_weights_sum_to_one(self):
        assert sum(config.SCORE_WEIGHTS.values()) == pytest.approx(1.0)

    def test_score_weight_names(self):
        assert set(config.SCORE_WEIGHTS) == {"rating", "sales", "engagement", "consistency"}

    def test_language_table_order(self):
        """Test French comes first so it wins ties"""
        assert list(config.LANGUAGE_KEYWORDS)[0] == "fr"

    def test_keywords_lowercase(self):
        for words in config.LANGUAGE_KEYWORDS.values():
            assert all(word == word.lower() for word in words)

    def test_mapped_countries_are_known(self):
        """Test every classifier country is also a known location"""
        for country in config.LANGUAGE_COUNTRY_MAP.values():
            assert country in config.KNOWN_COUNTRIES


@pytest.mark.unit
class TestConfigValidation:
    """Test validation helpers"""

    def test_valid_sales_conventions(self):
        for convention in config.SalesConvention.ALL:
            assert config.validate_sales_convention(convention) == convention

    def test_invalid_sales_convention(self):
        with pytest.raises(ValueError, match="Unknown sales convention"):
            config.validate_sales_convention("median")

    def test_valid_timeline_modes(self):
        assert config.validate_timeline_mode("adaptive") == "adaptive"
        assert config.validate_timeline_mode("trailing") == "trailing"

    def test_invalid_timeline_mode(self):
        with pytest.raises(ValueError, match="Unknown timeline mode"):
            config.validate_timeline_mode("weekly")


@pytest.mark.unit
class TestLoggingSetup:
    """Test the logging dictConfig helper"""

    def test_setup_logging_debug_does_not_mutate_config(self):
        with patch("logging.config.dictConfig") as mock_dict_config:
            config.setup_logging(debug=True)

        applied = mock_dict_config.call_args[0][0]
        assert applied["handlers"]["console"]["level"] == "DEBUG"
        assert applied["handlers"]["console"]["formatter"] == "detailed"
        assert config.LOG_CONFIG["handlers"]["console"]["formatter"] == "standard"

    def test_print_config_summary(self, capsys):
        config.print_config_summary()
        output = capsys.readouterr().out

        assert "Vintalyze Configuration" in output
        assert "Rating: 0.30" in output

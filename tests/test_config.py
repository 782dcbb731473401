"""
Unit tests for service configuration.
"""
import pytest

from cockpit.config import CockpitSettings, load_object, settings_summary
from cockpit.schema_aggregator import map_with_key


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("COCKPIT_PATH_PREFIX", raising=False)
        monkeypatch.delenv("COCKPIT_PORT", raising=False)
        settings = CockpitSettings()
        assert settings.path_prefix == "/api/ee-cockpit"
        assert settings.port == 8005

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("COCKPIT_PORT", "9100")
        monkeypatch.setenv("COCKPIT_DEBUG", "true")
        settings = CockpitSettings()
        assert settings.port == 9100
        assert settings.debug is True

    def test_summary_hides_password(self):
        settings = CockpitSettings(database_url="postgresql://cockpit:secret@db:5432/cockpit")
        summary = settings_summary(settings)
        assert "secret" not in summary
        assert "db:5432/cockpit" in summary
        assert "Event engine:" in summary


class TestLoadObject:
    """Test import path resolution."""

    def test_loads_attribute(self):
        assert load_object("cockpit.schema_aggregator:map_with_key") is map_with_key

    def test_loads_dotted_attribute(self):
        assert load_object("cockpit.config:CockpitSettings.model_config")["env_prefix"] == "COCKPIT_"

    @pytest.mark.parametrize("path", ["cockpit.config", ":attr", "cockpit.config:"])
    def test_invalid_path(self, path):
        with pytest.raises(ValueError):
            load_object(path)

    def test_missing_attribute(self):
        with pytest.raises(ValueError, match="has no attribute"):
            load_object("cockpit.config:does_not_exist")

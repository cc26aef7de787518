"""Unit tests for configuration registry."""

import pytest

from src.filestat.config.registry import (
    ConfigKey,
    REGISTRY,
    get_config_key,
    validate_config_value,
    get_default_values,
    get_static_keys,
    get_dynamic_keys,
    get_keys_with_prefix,
)


class TestConfigKey:
    """Test ConfigKey dataclass."""

    def test_config_key_static_restart_required(self):
        """Static config keys should have restart_required=True."""
        key = ConfigKey(tier="static", value_type=str, default="test")
        assert key.restart_required is True

    def test_config_key_dynamic_no_restart(self):
        """Dynamic config keys should have restart_required=False."""
        key = ConfigKey(tier="dynamic", value_type=int, default=42)
        assert key.restart_required is False


class TestRegistry:
    """Test configuration registry contents."""

    def test_filestat_keys_registered(self):
        assert REGISTRY["inputs.filestat.files"].tier == "static"
        assert REGISTRY["inputs.filestat.md5"].tier == "dynamic"

    def test_defaults(self):
        defaults = get_default_values()
        assert defaults["inputs.filestat.files"] == []
        assert defaults["inputs.filestat.md5"] is False
        assert defaults["logging.level"] == "INFO"

    def test_tiers_partition_registry(self):
        static = set(get_static_keys())
        dynamic = set(get_dynamic_keys())
        assert static.isdisjoint(dynamic)
        assert static | dynamic == set(REGISTRY)

    def test_get_unknown_key(self):
        with pytest.raises(KeyError, match="not found in registry"):
            get_config_key("inputs.unknown.files")

    def test_keys_with_prefix(self):
        assert sorted(get_keys_with_prefix("inputs.filestat")) == [
            "inputs.filestat.files",
            "inputs.filestat.md5",
        ]
        # Prefix must match a whole segment
        assert get_keys_with_prefix("inputs.file") == []


class TestValidation:
    """Test validate_config_value."""

    def test_valid_file_list(self):
        assert validate_config_value("inputs.filestat.files", ["/etc/hosts"]) == (True, None)

    def test_file_list_rejects_non_strings(self):
        is_valid, error = validate_config_value("inputs.filestat.files", ["/etc/hosts", 3])
        assert is_valid is False
        assert "Custom validation failed" in error

    def test_wrong_type(self):
        is_valid, error = validate_config_value("inputs.filestat.md5", "yes")
        assert is_valid is False
        assert "Expected type bool" in error

    def test_bool_is_not_an_int(self):
        is_valid, error = validate_config_value("agent.interval_seconds", True)
        assert is_valid is False
        assert "got bool" in error

    @pytest.mark.parametrize("value,fragment", [(0, "below minimum"), (3601, "above maximum")])
    def test_interval_bounds(self, value, fragment):
        is_valid, error = validate_config_value("agent.interval_seconds", value)
        assert is_valid is False
        assert fragment in error

    def test_log_level_validator(self):
        assert validate_config_value("logging.level", "DEBUG")[0] is True
        assert validate_config_value("logging.level", "LOUD")[0] is False

    def test_unknown_key(self):
        is_valid, error = validate_config_value("nope", 1)
        assert is_valid is False
        assert "not found" in error

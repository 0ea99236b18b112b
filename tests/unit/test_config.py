"""
Unit tests for configuration loader (packwerk_parity/config/settings.py)

Tests covering:
- Defaults
- YAML config file overrides
- Environment overrides and their priority
- Schema validation failures
"""

from pathlib import Path

import pytest

from packwerk_parity.config.settings import (
    DEFAULTS,
    ConfigurationError,
    Settings,
)


def _write_config(root: Path, content: str, name: str = "config/parity.yaml") -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaults:
    """Tests for built-in defaults."""

    def test_defaults_without_environment(self, tmp_path):
        """Test an empty environment yields the documented defaults."""
        settings = Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert settings.project_root == tmp_path
        assert settings.cache_dir == Path("tmp/cache/packwerk")
        assert settings.experimental_suffix == "-experimental"
        assert settings.report_path == Path("tmp/filename_to_digest_map.yml")
        assert settings.unit_pattern == "app/**/*.rb"
        assert settings.packs_dir == Path("../packs")
        assert settings.record_field == "unresolved_references"
        assert settings.key_field == "constant_name"
        assert settings.generate_caches is True

    def test_resolved_report_path(self, tmp_path):
        """Test the report path resolves against the project root."""
        settings = Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert settings.resolved_report_path == tmp_path / "tmp/filename_to_digest_map.yml"

    def test_absolute_report_path_kept(self, tmp_path):
        """Test an absolute report path is used as is."""
        target = tmp_path / "out" / "report.yml"
        settings = Settings.load(
            {"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_REPORT_PATH": str(target)}
        )

        assert settings.resolved_report_path == target


class TestEnvironmentOverrides:
    """Tests for PARITY_* variables."""

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("TRUE", True)])
    def test_generate_caches_flag(self, tmp_path, raw, expected):
        """Test boolean parsing of PARITY_GENERATE_CACHES."""
        settings = Settings.load(
            {"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_GENERATE_CACHES": raw}
        )
        assert settings.generate_caches is expected

    def test_invalid_flag_rejected(self, tmp_path):
        """Test a non-boolean flag fails validation."""
        with pytest.raises(ConfigurationError):
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_GENERATE_CACHES": "maybe"})

    def test_empty_value_rejected(self, tmp_path):
        """Test an empty string setting fails validation."""
        with pytest.raises(ConfigurationError):
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_KEY_FIELD": ""})

    def test_environment_beats_config_file(self, tmp_path):
        """Test environment variables take priority over the config file."""
        _write_config(tmp_path, "key_field: name\nunit_pattern: 'lib/**/*.rb'\n")

        settings = Settings.load(
            {"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_KEY_FIELD": "fully_qualified_name"}
        )

        assert settings.key_field == "fully_qualified_name"
        assert settings.unit_pattern == "lib/**/*.rb"


class TestConfigFile:
    """Tests for YAML config files."""

    def test_default_config_file_loaded(self, tmp_path):
        """Test config/parity.yaml under the project root is picked up."""
        _write_config(tmp_path, "generate_caches: false\ncache_dir: .cache\n")

        settings = Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert settings.generate_caches is False
        assert settings.cache_dir == Path(".cache")

    def test_explicit_config_file(self, tmp_path):
        """Test PARITY_CONFIG_FILE selects another file, relative to the root."""
        _write_config(tmp_path, "experimental_suffix: '.exp'\n", name="parity.yml")

        settings = Settings.load(
            {"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_CONFIG_FILE": "parity.yml"}
        )

        assert settings.experimental_suffix == ".exp"

    def test_missing_explicit_config_file(self, tmp_path):
        """Test a named but absent config file is an error."""
        with pytest.raises(ConfigurationError):
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path), "PARITY_CONFIG_FILE": "nope.yml"})

    def test_invalid_yaml(self, tmp_path):
        """Test YAML syntax errors raise ConfigurationError."""
        _write_config(tmp_path, "key_field: [unclosed\n")

        with pytest.raises(ConfigurationError):
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

    def test_non_mapping_config(self, tmp_path):
        """Test a config file holding a list is rejected."""
        _write_config(tmp_path, "- key_field\n")

        with pytest.raises(ConfigurationError):
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

    def test_unknown_key_rejected(self, tmp_path):
        """Test keys outside the schema are rejected."""
        _write_config(tmp_path, "colour: blue\n")

        with pytest.raises(ConfigurationError) as exc_info:
            Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert "colour" in str(exc_info.value)

    def test_empty_config_file(self, tmp_path):
        """Test an empty config file leaves the defaults."""
        _write_config(tmp_path, "")

        settings = Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert settings.key_field == DEFAULTS["key_field"]

    def test_project_root_in_file_ignored(self, tmp_path):
        """Test project_root cannot be moved by the file it lives in."""
        _write_config(tmp_path, "project_root: /elsewhere\n")

        settings = Settings.load({"PARITY_PROJECT_ROOT": str(tmp_path)})

        assert settings.project_root == tmp_path


class TestFromMapping:
    """Tests for Settings.from_mapping()."""

    def test_wrong_type_rejected(self):
        """Test a non-string value fails validation."""
        with pytest.raises(ConfigurationError):
            Settings.from_mapping({"record_field": 3})

    def test_overrides_applied(self):
        """Test overrides replace defaults."""
        settings = Settings.from_mapping({"record_field": "definitions"})
        assert settings.record_field == "definitions"
        assert settings.key_field == "constant_name"

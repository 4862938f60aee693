"""Tests for whisker.config and whisker.config_loader."""

from pathlib import Path

import pytest

from whisker._errors import ConfigError
from whisker.config import DEFAULT_PATTERNS, WhiskerConfig
from whisker.config_loader import load_config


class TestWhiskerConfig:
    """WhiskerConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path)
        assert config.host == "localhost"
        assert config.port == 8888
        assert config.patterns == ("**/*.js", "**/*.css")
        assert config.verbose is False
        assert config.url == "ws://localhost:8888/"

    def test_frozen(self) -> None:
        config = WhiskerConfig()
        with pytest.raises(AttributeError):
            config.port = 8000  # type: ignore[misc]

    def test_relative_root_resolved(self) -> None:
        config = WhiskerConfig(root=Path("assets"))
        assert config.root.is_absolute()
        assert config.root.name == "assets"

    def test_single_pattern_string(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path, patterns="*.ts")  # type: ignore[arg-type]
        assert config.patterns == ("*.ts",)

    def test_pattern_list_becomes_tuple(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path, patterns=["*.ts", "*.css"])  # type: ignore[arg-type]
        assert config.patterns == ("*.ts", "*.css")

    def test_port_zero_allowed(self, tmp_path: Path) -> None:
        assert WhiskerConfig(root=tmp_path, port=0).port == 0

    @pytest.mark.parametrize("port", [-1, "8888", True, 1.5])
    def test_bad_port(self, tmp_path: Path, port: object) -> None:
        with pytest.raises(ConfigError, match="port"):
            WhiskerConfig(root=tmp_path, port=port)  # type: ignore[arg-type]

    def test_empty_patterns(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="pattern"):
            WhiskerConfig(root=tmp_path, patterns=())


class TestLoadConfig:
    """load_config() — whisker.yaml / whisker.toml plus CLI overrides."""

    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path
        assert config.port == 8888
        assert config.patterns == DEFAULT_PATTERNS

    def test_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text(
            "port: 9000\nhost: 0.0.0.0\npatterns:\n  - '**/*.ts'\n"
        )
        config = load_config(tmp_path)
        assert config.port == 9000
        assert config.host == "0.0.0.0"
        assert config.patterns == ("**/*.ts",)

    def test_yml_nested_section(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yml").write_text("whisker:\n  port: 9100\n  verbose: true\n")
        config = load_config(tmp_path)
        assert config.port == 9100
        assert config.verbose is True

    def test_toml_file(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.toml").write_text(
            '[whisker]\nport = 9200\npatterns = ["src/**/*.js"]\n'
        )
        config = load_config(tmp_path)
        assert config.port == 9200
        assert config.patterns == ("src/**/*.js",)

    def test_yaml_wins_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("port: 9300\n")
        (tmp_path / "whisker.toml").write_text("port = 9400\n")
        assert load_config(tmp_path).port == 9300

    def test_overrides_beat_file(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("port: 9000\nhost: 0.0.0.0\n")
        config = load_config(tmp_path, port=9999)
        assert config.port == 9999
        assert config.host == "0.0.0.0"

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("port: 9000\n")
        config = load_config(tmp_path, port=None, host=None, patterns=None, verbose=None)
        assert config.port == 9000
        assert config.host == "localhost"

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("theme: dark\nport: 9000\n")
        assert load_config(tmp_path).port == 9000

    def test_broken_yaml_falls_back(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("port: [unclosed\n")
        assert load_config(tmp_path).port == 8888

    def test_broken_toml_falls_back(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.toml").write_text("port = = 1\n")
        assert load_config(tmp_path).port == 8888

    def test_yaml_scalar_document_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("just a string\n")
        assert load_config(tmp_path).port == 8888

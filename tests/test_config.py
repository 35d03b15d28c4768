"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from crate_inspector.builder import CrateBuilder
from crate_inspector.config import DEFAULT_CONFIG
from crate_inspector.utils.config_loader import ConfigError, ConfigLoader


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
	"""Create a temporary config file path for testing."""
	return tmp_path / ".crate-inspector.yml"


@pytest.mark.unit
@pytest.mark.config
@pytest.mark.usefixtures("isolated_cwd")
class TestConfigLoader:
	def test_default_config_loading(self) -> None:
		"""Without a config file the defaults are used unchanged."""
		config_loader = ConfigLoader(None)
		assert config_loader.config_file is None
		for key in DEFAULT_CONFIG:
			assert config_loader.config[key] == DEFAULT_CONFIG[key], f"Mismatch in {key} section"

	def test_defaults_are_not_shared(self) -> None:
		config_loader = ConfigLoader(None)
		config_loader.set("build.features", ["serde"])
		assert DEFAULT_CONFIG["build"]["features"] == []

	def test_custom_config_loading(self, temp_config_file: Path) -> None:
		temp_config_file.write_text(
			yaml.dump({"build": {"toolchain": "nightly-2024-06-01", "features": ["serde"]}, "render": {"dialect": "alternate"}})
		)
		config_loader = ConfigLoader(str(temp_config_file))

		assert config_loader.get("build.toolchain") == "nightly-2024-06-01"
		assert config_loader.get("build.features") == ["serde"]
		assert config_loader.get("render.dialect") == "alternate"
		# Keys not in the file keep their defaults
		assert config_loader.get("build.manifest_path") == "Cargo.toml"
		assert config_loader.get("render.max_depth") == 128

	def test_local_config_is_discovered(self, isolated_cwd: Path) -> None:
		(isolated_cwd / ".crate-inspector.yml").write_text(yaml.dump({"render": {"max_depth": 32}}))
		config_loader = ConfigLoader()
		assert config_loader.get("render.max_depth") == 32

	def test_xdg_config_is_discovered(self, tmp_path: Path) -> None:
		xdg_file = tmp_path / "xdg" / "crate-inspector" / "config.yml"
		xdg_file.parent.mkdir(parents=True)
		xdg_file.write_text(yaml.dump({"build": {"toolchain": "beta"}}))
		config_loader = ConfigLoader()
		assert config_loader.get("build.toolchain") == "beta"

	def test_missing_explicit_file(self, tmp_path: Path) -> None:
		with pytest.raises(ConfigError, match="not found"):
			ConfigLoader(tmp_path / "nope.yml")

	def test_malformed_yaml(self, temp_config_file: Path) -> None:
		temp_config_file.write_text("build: [unclosed\n")
		with pytest.raises(ConfigError, match="Error loading configuration"):
			ConfigLoader(temp_config_file)

	def test_non_mapping_yaml(self, temp_config_file: Path) -> None:
		temp_config_file.write_text("- just\n- a list\n")
		with pytest.raises(ConfigError, match="must be a mapping"):
			ConfigLoader(temp_config_file)

	@pytest.mark.parametrize("max_depth", [0, -5, "deep", True])
	def test_invalid_max_depth(self, temp_config_file: Path, max_depth: object) -> None:
		temp_config_file.write_text(yaml.dump({"render": {"max_depth": max_depth}}))
		with pytest.raises(ConfigError, match="max_depth must be a positive integer"):
			ConfigLoader(temp_config_file)

	def test_invalid_dialects(self, temp_config_file: Path) -> None:
		temp_config_file.write_text(yaml.dump({"render": {"dialects": ["native"]}}))
		with pytest.raises(ConfigError, match="render.dialects"):
			ConfigLoader(temp_config_file)

	def test_invalid_features(self, temp_config_file: Path) -> None:
		temp_config_file.write_text(yaml.dump({"build": {"features": "serde"}}))
		with pytest.raises(ConfigError, match="build.features must be a list"):
			ConfigLoader(temp_config_file)

	def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
		monkeypatch.setenv("CRATE_INSPECTOR_RENDER_MAX_DEPTH", "64")
		monkeypatch.setenv("CRATE_INSPECTOR_BUILD_DOCUMENT_PRIVATE_ITEMS", "yes")
		monkeypatch.setenv("CRATE_INSPECTOR_BUILD_FEATURES", "serde, std")
		monkeypatch.setenv("CRATE_INSPECTOR_BUILD_TARGET_DIR", "/tmp/target")
		config_loader = ConfigLoader()
		assert config_loader.get("render.max_depth") == 64
		assert config_loader.get("build.document_private_items") is True
		assert config_loader.get("build.features") == ["serde", "std"]
		assert config_loader.get("build.target_dir") == "/tmp/target"

	def test_string_settings_stay_strings(self, monkeypatch: pytest.MonkeyPatch) -> None:
		"""Numeric-looking toolchain names are not turned into numbers."""
		monkeypatch.setenv("CRATE_INSPECTOR_BUILD_TOOLCHAIN", "1.80")
		monkeypatch.setenv("CRATE_INSPECTOR_BUILD_TARGET", "1")
		monkeypatch.setenv("CRATE_INSPECTOR_RENDER_DIALECT", "2")
		config_loader = ConfigLoader()
		assert config_loader.get("build.toolchain") == "1.80"
		assert config_loader.get("build.target") == "1"
		assert config_loader.get("render.dialect") == "2"

		command = CrateBuilder.from_config(config_loader.get_build_config()).rustdoc_command()
		assert command[1] == "+1.80"

	@pytest.mark.parametrize(
		("name", "value", "message"),
		[
			("CRATE_INSPECTOR_RENDER_MAX_DEPTH", "deep", "must be an integer"),
			("CRATE_INSPECTOR_BUILD_ALL_FEATURES", "maybe", "must be a boolean"),
		],
	)
	def test_invalid_environment_values(
		self, monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
	) -> None:
		monkeypatch.setenv(name, value)
		with pytest.raises(ConfigError, match=message):
			ConfigLoader()

	def test_get_with_default(self) -> None:
		config_loader = ConfigLoader()
		assert config_loader.get("render.missing", "fallback") == "fallback"
		assert config_loader.get("nothing.at.all") is None

	def test_section_helpers(self) -> None:
		config_loader = ConfigLoader()
		assert config_loader.get_build_config()["toolchain"] == "nightly"
		assert config_loader.get_render_config()["dialect"] == "native"

	@pytest.mark.fs
	def test_save_and_reload(self, tmp_path: Path) -> None:
		config_loader = ConfigLoader()
		config_loader.set("render.dialects.terse", {"base": "native", "conjunction": "+"})
		saved = tmp_path / "saved" / "config.yml"
		config_loader.save(saved)

		reloaded = ConfigLoader(saved)
		assert reloaded.get("render.dialects") == {"terse": {"base": "native", "conjunction": "+"}}

	def test_save_without_file(self) -> None:
		config_loader = ConfigLoader()
		with pytest.raises(ConfigError, match="No configuration file"):
			config_loader.save()

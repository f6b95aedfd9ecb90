"""Tests for YAML trait configuration and resource loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from reconcile_traits.config import (
    ENV_ENABLE,
    load_environment,
    load_trait_config,
    resolve_trait_config,
)
from reconcile_traits.errors import ConfigValidationError
from reconcile_traits.models import IntegrationContextPhase, IntegrationPhase
from reconcile_traits.trait import TraitConfig

FIXTURES = Path(__file__).parent / "fixtures"
RESOURCES = FIXTURES / "resources"
CONFIG = FIXTURES / "config"


class TestLoadTraitConfig:
    def test_enabled(self) -> None:
        assert load_trait_config(CONFIG / "springboot_enabled.yaml") == {
            "springboot": TraitConfig(enabled=True)
        }

    def test_disabled(self) -> None:
        configs = load_trait_config(CONFIG / "springboot_disabled.yaml")
        assert configs["springboot"].enabled is False

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.yaml"
        path.write_text("", encoding="utf-8")
        assert load_trait_config(path) == {}

    def test_trait_without_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.yaml"
        path.write_text("traits:\n  springboot:\n", encoding="utf-8")
        assert load_trait_config(path) == {"springboot": TraitConfig()}

    def test_auto_rejected_for_fixed_policy_trait(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.yaml"
        path.write_text("traits:\n  springboot:\n    enabled: true\n    auto: true\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError) as excinfo:
            load_trait_config(path)
        assert excinfo.value.errors == ["traits.springboot.auto is not configurable for this trait"]

    def test_invalid_reports_all_errors(self) -> None:
        with pytest.raises(ConfigValidationError) as excinfo:
            load_trait_config(CONFIG / "invalid_traits.yaml")

        message = str(excinfo.value)
        assert "Invalid file" in message
        assert "Unexpected top-level keys: extra" in message
        assert "traits.springboot.enabled must be a boolean" in message
        assert "traits.springboot has unexpected keys: replicas" in message
        assert "traits.tracing is not a known trait" in message
        assert len(excinfo.value.errors) == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_trait_config(tmp_path / "nope.yaml")

    def test_wrong_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="Unsupported file extension"):
            load_trait_config(path)

    def test_yaml_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "traits.yaml"
        path.write_text("traits: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_trait_config(path)


class TestResolveTraitConfig:
    def test_defaults_to_empty(self) -> None:
        assert resolve_trait_config(environ={}) == {}

    def test_env_var_enables(self) -> None:
        configs = resolve_trait_config(environ={ENV_ENABLE: " SpringBoot , "})
        assert configs == {"springboot": TraitConfig(enabled=True)}

    def test_file_wins_over_env_var(self) -> None:
        configs = resolve_trait_config(
            CONFIG / "springboot_disabled.yaml",
            environ={ENV_ENABLE: "springboot"},
        )
        assert configs["springboot"].enabled is False

    def test_env_var_unknown_trait(self) -> None:
        with pytest.raises(ValueError, match="Unknown trait 'tracing'"):
            resolve_trait_config(environ={ENV_ENABLE: "tracing"})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_ENABLE, "springboot")
        assert resolve_trait_config()["springboot"].enabled is True


class TestLoadEnvironment:
    def test_new_integration(self) -> None:
        env = load_environment(RESOURCES / "integration_new.yaml")

        assert env.context is None
        assert env.integration is not None
        assert env.integration.name == "hello"
        assert env.integration.status.phase is IntegrationPhase.NONE
        assert env.integration.spec.dependencies == ["b-lib"]
        assert env.integration.spec.sources == ["routes.groovy"]
        assert len(env.steps) == 0

    def test_deploying_integration(self) -> None:
        env = load_environment(RESOURCES / "integration_deploying.yaml")
        assert env.integration is not None
        assert env.integration.status.phase is IntegrationPhase.DEPLOYING

    def test_building_context_seeded_with_default_steps(self) -> None:
        env = load_environment(RESOURCES / "context_building.yaml")

        assert env.integration is None
        assert env.context is not None
        assert env.context.status.phase is IntegrationContextPhase.BUILDING
        assert env.steps.names() == [
            "initialize/default",
            "generate/default",
            "build/project",
            "package/default",
            "publish/default",
        ]

    def test_missing_phase_means_new(self, tmp_path: Path) -> None:
        path = tmp_path / "resource.yaml"
        path.write_text("kind: Integration\nname: hello\n", encoding="utf-8")
        env = load_environment(path)
        assert env.integration is not None
        assert env.integration.status.phase is IntegrationPhase.NONE

    def test_invalid_reports_all_errors(self) -> None:
        with pytest.raises(ConfigValidationError) as excinfo:
            load_environment(RESOURCES / "invalid_resource.yaml")

        message = str(excinfo.value)
        assert "Unexpected keys: replicas" in message
        assert "kind must be one of: Integration, IntegrationContext" in message
        assert "name is required" in message
        assert "dependencies[0] must be a string" in message
        assert "dependencies[1] must be a non-empty string" in message
        assert "phase must be a string" in message

    def test_unknown_phase(self, tmp_path: Path) -> None:
        path = tmp_path / "resource.yaml"
        path.write_text("kind: IntegrationContext\nname: ctx\nphase: Deploying\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="phase 'Deploying' is not valid"):
            load_environment(path)

    def test_sources_rejected_on_context(self, tmp_path: Path) -> None:
        path = tmp_path / "resource.yaml"
        path.write_text(
            "kind: IntegrationContext\nname: ctx\nsources: [routes.groovy]\n",
            encoding="utf-8",
        )
        with pytest.raises(ConfigValidationError, match="sources is only allowed"):
            load_environment(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "resource.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigValidationError, match="File is empty"):
            load_environment(path)

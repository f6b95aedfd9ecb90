"""YAML loading for trait configuration and resource documents.

Trait configuration::

    traits:
      springboot:
        enabled: true

Resource documents describe the single resource a pass acts on::

    kind: Integration          # or IntegrationContext
    name: hello
    phase: ""                  # lifecycle phase, empty for new resources
    dependencies: [camel:http]

Every problem found in a file is collected and reported at once through
:class:`~reconcile_traits.errors.ConfigValidationError`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from reconcile_traits.builder import StepRegistry
from reconcile_traits.environment import Environment
from reconcile_traits.errors import ConfigValidationError
from reconcile_traits.models import (
    Integration,
    IntegrationContext,
    IntegrationContextPhase,
    IntegrationContextSpec,
    IntegrationContextStatus,
    IntegrationPhase,
    IntegrationSpec,
    IntegrationStatus,
)
from reconcile_traits.steps import default_steps
from reconcile_traits.trait import BaseTrait, TraitConfig
from reconcile_traits.traits import BUILTIN_TRAITS

__all__ = [
    "ENV_ENABLE",
    "load_environment",
    "load_trait_config",
    "resolve_trait_config",
]

ENV_ENABLE = "RECONCILE_TRAITS_ENABLE"

_YAML_EXTENSIONS = frozenset((".yaml", ".yml"))
_TRAIT_KEYS = frozenset(("enabled", "auto"))
_RESOURCE_KEYS = frozenset(("kind", "name", "phase", "dependencies", "sources"))
_KINDS = ("Integration", "IntegrationContext")
_MISSING: object = object()


# ---------------------------------------------------------------------------
# Trait configuration
# ---------------------------------------------------------------------------


def load_trait_config(path: Path) -> dict[str, TraitConfig]:
    """Load and validate a trait configuration file."""
    resolved, data = _read_yaml(path)
    if data is None:
        return {}

    errors: list[str] = []
    if not isinstance(data, dict):
        raise ConfigValidationError(resolved, ["Top-level YAML document must be a mapping."])

    extra_top = sorted(str(key) for key in data if key != "traits")
    if extra_top:
        errors.append(f"Unexpected top-level keys: {', '.join(extra_top)}. Allowed keys: traits.")

    traits = data.get("traits", {})
    configs: dict[str, TraitConfig] = {}
    if traits is None:
        traits = {}
    if not isinstance(traits, dict):
        errors.append("traits must be a mapping of trait id to settings")
        traits = {}

    known = _builtin_ids()
    for trait_id, settings in traits.items():
        location = f"traits.{trait_id}"
        if trait_id not in known:
            errors.append(f"{location} is not a known trait. Known traits: {', '.join(known)}.")
            continue
        if settings is None:
            configs[trait_id] = TraitConfig()
            continue
        if not isinstance(settings, dict):
            errors.append(f"{location} must be a mapping")
            continue
        extra = sorted(str(key) for key in settings if key not in _TRAIT_KEYS)
        if extra:
            errors.append(
                f"{location} has unexpected keys: {', '.join(extra)}. Allowed keys: enabled, auto."
            )
        enabled = _validate_optional_bool(settings.get("enabled"), f"{location}.enabled", errors)
        auto = _validate_optional_bool(settings.get("auto"), f"{location}.auto", errors)
        if auto is not None and not _builtin_classes()[trait_id].auto_configurable:
            errors.append(f"{location}.auto is not configurable for this trait")
            auto = None
        configs[trait_id] = TraitConfig(enabled=enabled, auto=auto)

    if errors:
        raise ConfigValidationError(resolved, errors)
    return configs


def resolve_trait_config(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> dict[str, TraitConfig]:
    """Return trait configuration after applying precedence rules.

    A value set in the file wins over the environment variable, which only
    ever turns traits on.
    """
    configs = load_trait_config(path) if path is not None else {}
    env = os.environ if environ is None else environ
    raw = env.get(ENV_ENABLE, "")
    known = _builtin_ids()
    for item in raw.split(","):
        trait_id = item.strip().lower()
        if not trait_id:
            continue
        if trait_id not in known:
            msg = f"Unknown trait '{trait_id}' in {ENV_ENABLE}. Known traits: {', '.join(known)}"
            raise ValueError(msg)
        current = configs.get(trait_id, TraitConfig())
        if current.enabled is None:
            configs[trait_id] = TraitConfig(enabled=True, auto=current.auto)
    return configs


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def load_environment(path: Path) -> Environment:
    """Load a resource document into a fresh pass environment.

    Build contexts are seeded with the default build pipeline.
    """
    resolved, data = _read_yaml(path)
    if data is None:
        raise ConfigValidationError(resolved, ["File is empty. Expected a resource mapping."])
    if not isinstance(data, dict):
        raise ConfigValidationError(resolved, ["Top-level YAML document must be a mapping."])

    errors: list[str] = []
    extra = sorted(str(key) for key in data if key not in _RESOURCE_KEYS)
    if extra:
        errors.append(
            f"Unexpected keys: {', '.join(extra)}. "
            "Allowed keys: kind, name, phase, dependencies, sources."
        )

    kind = data.get("kind", _MISSING)
    if kind is _MISSING:
        errors.append("kind is required")
    elif kind not in _KINDS:
        errors.append(f"kind must be one of: {', '.join(_KINDS)}")

    name = data.get("name", _MISSING)
    if name is _MISSING:
        errors.append("name is required")
    elif not isinstance(name, str) or not name.strip():
        errors.append("name must be a non-empty string")

    dependencies = _validate_str_list(data.get("dependencies", []), "dependencies", errors)
    sources = _validate_str_list(data.get("sources", []), "sources", errors)

    phase_raw = data.get("phase", "")
    if phase_raw is None:
        phase_raw = ""
    phase: IntegrationPhase | IntegrationContextPhase | None = None
    if not isinstance(phase_raw, str):
        errors.append("phase must be a string")
    elif kind == "Integration":
        phase = _parse_phase(IntegrationPhase, phase_raw, errors)
    elif kind == "IntegrationContext":
        phase = _parse_phase(IntegrationContextPhase, phase_raw, errors)
        if sources:
            errors.append("sources is only allowed on Integration resources")

    if errors:
        raise ConfigValidationError(resolved, errors)

    if isinstance(phase, IntegrationPhase):
        integration = Integration(
            name=name,
            spec=IntegrationSpec(dependencies=dependencies, sources=sources),
            status=IntegrationStatus(phase=phase),
        )
        return Environment(integration=integration)

    if isinstance(phase, IntegrationContextPhase):
        context = IntegrationContext(
            name=name,
            spec=IntegrationContextSpec(dependencies=dependencies),
            status=IntegrationContextStatus(phase=phase),
        )
        return Environment(context=context, steps=StepRegistry(default_steps()))

    msg = f"Unsupported resource kind: {kind}"
    raise ConfigValidationError(resolved, [msg])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _builtin_ids() -> list[str]:
    return list(_builtin_classes())


def _builtin_classes() -> dict[str, type[BaseTrait]]:
    return {trait_cls().id: trait_cls for trait_cls in BUILTIN_TRAITS}


def _read_yaml(path: Path) -> tuple[Path, Any]:
    resolved = path.resolve()
    if not resolved.is_file():
        msg = f"File not found: {resolved}"
        raise FileNotFoundError(msg)
    suffix = resolved.suffix.lower()
    if suffix not in _YAML_EXTENSIONS:
        raise ConfigValidationError(
            resolved,
            [f"Unsupported file extension '{suffix}'. Use .yaml or .yml."],
        )
    raw = resolved.read_text(encoding="utf-8")
    try:
        return resolved, yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(resolved, [f"YAML parse error: {str(exc).strip()}"]) from exc


def _parse_phase(
    enum_cls: type[IntegrationPhase] | type[IntegrationContextPhase],
    value: str,
    errors: list[str],
) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(member.value) for member in enum_cls)
        errors.append(f"phase {value!r} is not valid. Allowed phases: {allowed}")
        return None


def _validate_optional_bool(value: Any, path: str, errors: list[str]) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        errors.append(f"{path} must be a boolean")
        return None
    return value


def _validate_str_list(value: Any, path: str, errors: list[str]) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        errors.append(f"{path} must be a list of strings")
        return []
    items: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            errors.append(f"{path}[{index}] must be a string")
            continue
        if not item.strip():
            errors.append(f"{path}[{index}] must be a non-empty string")
            continue
        items.append(item)
    return items

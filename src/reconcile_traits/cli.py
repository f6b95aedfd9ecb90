"""Command-line interface for reconcile-traits."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from reconcile_traits import __version__
from reconcile_traits.environment import Environment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reconcile-traits",
        description="Apply phase-gated traits to a resource and print the resulting environment.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command")

    apply_parser = subparsers.add_parser("apply", help="Run one trait pass over a resource.")
    apply_parser.add_argument(
        "--resource",
        type=Path,
        required=True,
        help="Path to the YAML resource document.",
    )
    apply_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the YAML trait configuration. RECONCILE_TRAITS_ENABLE also enables traits.",
    )
    apply_parser.add_argument(
        "--build",
        action="store_true",
        default=False,
        help="Run the build steps after the pass (build contexts only).",
    )

    traits_parser = subparsers.add_parser("traits", help="List the built-in traits.")
    traits_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional trait configuration to show effective flags.",
    )

    return parser


def _apply_command(resource_path: Path, config_path: Path | None, *, run_build: bool) -> int:
    """Execute the 'apply' subcommand."""
    from reconcile_traits.builder import build
    from reconcile_traits.catalog import Catalog
    from reconcile_traits.config import load_environment, resolve_trait_config
    from reconcile_traits.errors import ApplyError, ConfigValidationError, StepError

    try:
        configs = resolve_trait_config(config_path)
        env = load_environment(resource_path)
        catalog = Catalog.default(configs)
    except (FileNotFoundError, ConfigValidationError, KeyError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        catalog.apply(env)
    except ApplyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    executed: list[str] | None = None
    if run_build:
        if env.context is None:
            print("Error: --build requires an IntegrationContext resource", file=sys.stderr)
            return 1
        try:
            executed = build(env)
        except StepError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    print(yaml.safe_dump(_render_environment(env, executed), sort_keys=False), end="")
    return 0


def _traits_command(config_path: Path | None) -> int:
    from reconcile_traits.catalog import Catalog, is_active
    from reconcile_traits.config import resolve_trait_config
    from reconcile_traits.errors import ConfigValidationError

    try:
        catalog = Catalog.default(resolve_trait_config(config_path))
    except (FileNotFoundError, ConfigValidationError, KeyError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for trait in catalog.traits:
        print(
            f"{trait.id}: auto={str(trait.is_auto()).lower()} "
            f"enabled={str(trait.is_enabled()).lower()} "
            f"active={str(is_active(trait)).lower()}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "apply":
        resource_path: Path = args.resource
        config_path: Path | None = args.config
        run_build: bool = args.build
        return _apply_command(resource_path, config_path, run_build=run_build)

    if args.command == "traits":
        traits_config: Path | None = args.config
        return _traits_command(traits_config)

    # No subcommand — print help by default.
    parser.print_help()
    return 0


def _render_environment(env: Environment, executed: list[str] | None) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if env.integration is not None:
        payload["integration"] = {
            "name": env.integration.name,
            "phase": str(env.integration.status.phase.value),
            "dependencies": list(env.integration.spec.dependencies),
        }
    if env.context is not None:
        payload["context"] = {
            "name": env.context.name,
            "phase": str(env.context.status.phase.value),
            "dependencies": list(env.context.spec.dependencies),
        }
    payload["envVars"] = dict(sorted(env.env_vars.items()))
    payload["steps"] = [
        {"name": step.name, "phase": step.phase} for step in env.steps.ordered()
    ]
    payload["executedTraits"] = list(env.executed_traits)
    if executed is not None:
        payload["build"] = {
            "executed": executed,
            "artifacts": [
                {"id": artifact.id, "target": artifact.target} for artifact in env.artifacts
            ],
            "properties": dict(sorted(env.build_properties.items())),
        }
    return payload


if __name__ == "__main__":
    sys.exit(main())

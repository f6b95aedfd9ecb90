"""Default build step bodies and the standard pipeline.

The controller seeds every build-context environment with
:func:`default_steps`. Traits may then replace the generation step or add
their own steps around the named phases.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reconcile_traits.builder import (
    APPLICATION_PACKAGE_PHASE,
    APPLICATION_PUBLISH_PHASE,
    INIT_PHASE,
    PROJECT_BUILD_PHASE,
    PROJECT_GENERATION_PHASE,
    BuildStep,
)
from reconcile_traits.models import Artifact, IntegrationContext, Project

if TYPE_CHECKING:
    from reconcile_traits.environment import Environment

__all__ = [
    "CAMEL_VERSION",
    "RUNTIME_VERSION",
    "artifact_for",
    "build_project",
    "default_steps",
    "generate_project",
    "initialize",
    "package_application",
    "publish_application",
    "resolve_dependency",
]

log = logging.getLogger(__name__)

CAMEL_VERSION = "2.22.1"
RUNTIME_VERSION = "0.0.6"

PROJECT_GROUP_ID = "org.apache.camel.k.integration"
PROJECT_ARTIFACT_ID = "camel-k-integration"

_REPOSITORY = "repository"
_DEPENDENCIES_DIR = "dependencies"

_MANAGED_VERSIONS = {
    "org.apache.camel": CAMEL_VERSION,
    "org.apache.camel.k": RUNTIME_VERSION,
}


# ---------------------------------------------------------------------------
# Dependency mapping
# ---------------------------------------------------------------------------


def resolve_dependency(dependency: str) -> str:
    """Translate a resource dependency into Maven ``group:artifact[:version]`` form.

    Supported prefixes are ``camel:``, ``runtime:`` and ``mvn:``.
    """
    kind, _, value = dependency.partition(":")
    if not value:
        msg = f"Malformed dependency: {dependency!r}"
        raise ValueError(msg)
    if kind == "camel":
        return f"org.apache.camel:camel-{value}"
    if kind == "runtime":
        return f"org.apache.camel.k:camel-k-runtime-{value}"
    if kind == "mvn":
        parts = value.split(":")
        if len(parts) not in (2, 3) or not all(parts):
            msg = f"Malformed maven dependency: {dependency!r}"
            raise ValueError(msg)
        return value
    msg = f"Unknown dependency type: {dependency!r}"
    raise ValueError(msg)


def artifact_for(
    coordinates: str,
    *,
    target_dir: str = _DEPENDENCIES_DIR,
    managed: dict[str, str] | None = None,
) -> Artifact:
    """Build the Artifact for ``group:artifact[:version]`` coordinates.

    Versionless coordinates take their version from *managed*, keyed by
    group id.
    """
    versions = managed if managed is not None else _MANAGED_VERSIONS
    parts = coordinates.split(":")
    group, name = parts[0], parts[1]
    version = parts[2] if len(parts) > 2 else versions.get(group)
    if version is None:
        msg = f"No version available for {coordinates}"
        raise ValueError(msg)
    location = f"{_REPOSITORY}/{group.replace('.', '/')}/{name}/{version}/{name}-{version}.jar"
    filename = f"{group}.{name}-{version}.jar"
    target = f"{target_dir}/{filename}" if target_dir else filename
    return Artifact(id=f"{group}:{name}:{version}", location=location, target=target)


def _require_context(env: Environment) -> IntegrationContext:
    if env.context is None:
        msg = "environment has no build context"
        raise ValueError(msg)
    return env.context


def _require_project(env: Environment) -> Project:
    if env.project is None:
        msg = "project has not been generated"
        raise ValueError(msg)
    return env.project


# ---------------------------------------------------------------------------
# Step bodies
# ---------------------------------------------------------------------------


def initialize(env: Environment) -> None:
    _require_context(env)
    env.project = None
    env.artifacts = []
    env.build_properties.setdefault("runtime", "jvm")


def generate_project(env: Environment) -> None:
    """Generate a plain JVM project from the build context dependencies."""
    context = _require_context(env)
    dependencies = sorted({resolve_dependency(dep) for dep in context.spec.dependencies})
    env.project = Project(
        group_id=PROJECT_GROUP_ID,
        artifact_id=PROJECT_ARTIFACT_ID,
        version=RUNTIME_VERSION,
        runtime="jvm",
        dependencies=dependencies,
        dependency_management=[f"org.apache.camel:camel-bom:{CAMEL_VERSION}"],
    )
    log.debug("Generated project with %d dependencies", len(dependencies))


def build_project(env: Environment) -> None:
    project = _require_project(env)
    env.artifacts = sorted(
        (artifact_for(coordinates) for coordinates in project.dependencies),
        key=lambda artifact: artifact.id,
    )


def package_application(env: Environment) -> None:
    _require_project(env)
    env.build_properties["package.artifacts"] = str(len(env.artifacts))


def publish_application(env: Environment) -> None:
    context = _require_context(env)
    env.build_properties["image"] = f"{context.name}:{RUNTIME_VERSION}"


def default_steps() -> list[BuildStep]:
    """Return the standard pipeline, one step per named phase."""
    return [
        BuildStep("initialize/default", INIT_PHASE, initialize),
        BuildStep("generate/default", PROJECT_GENERATION_PHASE, generate_project),
        BuildStep("build/project", PROJECT_BUILD_PHASE, build_project),
        BuildStep("package/default", APPLICATION_PACKAGE_PHASE, package_application),
        BuildStep("publish/default", APPLICATION_PUBLISH_PHASE, publish_application),
    ]

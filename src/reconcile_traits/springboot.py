"""Build step bodies used by the spring-boot trait.

Spring Boot integrations are launched through ``PropertiesLauncher``, which
loads libraries from ``LOADER_PATH``. The dependency step therefore lays
out every library under ``dependencies/`` except the runtime jar, which
stays at the image root.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from reconcile_traits.models import Project
from reconcile_traits.steps import (
    CAMEL_VERSION,
    PROJECT_ARTIFACT_ID,
    PROJECT_GROUP_ID,
    RUNTIME_VERSION,
    artifact_for,
    resolve_dependency,
)

if TYPE_CHECKING:
    from reconcile_traits.environment import Environment

__all__ = [
    "RUNTIME_DEPENDENCY",
    "SPRING_BOOT_VERSION",
    "compute_dependencies",
    "generate_project",
    "initialize",
]

log = logging.getLogger(__name__)

SPRING_BOOT_VERSION = "2.0.3.RELEASE"

RUNTIME_DEPENDENCY = "runtime:spring-boot"
_RUNTIME_COORDINATES = "org.apache.camel.k:camel-k-runtime-spring-boot"

_MANAGED_VERSIONS = {
    "org.apache.camel": CAMEL_VERSION,
    "org.apache.camel.k": RUNTIME_VERSION,
    "org.springframework.boot": SPRING_BOOT_VERSION,
}


def initialize(env: Environment) -> None:
    env.build_properties["runtime"] = "spring-boot"


def generate_project(env: Environment) -> None:
    """Generate a project wired for the Spring Boot runtime.

    Camel components are swapped for their ``-starter`` variants and the
    Spring Boot BOM is imported next to the Camel one.
    """
    if env.context is None:
        msg = "environment has no build context"
        raise ValueError(msg)

    dependencies = {_RUNTIME_COORDINATES}
    for dependency in env.context.spec.dependencies:
        if dependency.startswith("runtime:"):
            # The only runtime allowed here is spring-boot itself.
            continue
        coordinates = resolve_dependency(dependency)
        if dependency.startswith("camel:"):
            coordinates = f"{coordinates}-starter"
        dependencies.add(coordinates)

    env.project = Project(
        group_id=PROJECT_GROUP_ID,
        artifact_id=PROJECT_ARTIFACT_ID,
        version=RUNTIME_VERSION,
        runtime="spring-boot",
        dependencies=sorted(dependencies),
        dependency_management=[
            f"org.apache.camel:camel-spring-boot-dependencies:{CAMEL_VERSION}",
            f"org.springframework.boot:spring-boot-dependencies:{SPRING_BOOT_VERSION}",
        ],
        properties={"spring-boot.version": SPRING_BOOT_VERSION},
    )
    log.debug("Generated spring-boot project with %d dependencies", len(dependencies))


def compute_dependencies(env: Environment) -> None:
    if env.project is None:
        msg = "project has not been generated"
        raise ValueError(msg)

    artifacts = []
    for coordinates in env.project.dependencies:
        target_dir = "" if coordinates == _RUNTIME_COORDINATES else "dependencies"
        artifacts.append(
            artifact_for(coordinates, target_dir=target_dir, managed=_MANAGED_VERSIONS)
        )
    env.artifacts = sorted(artifacts, key=lambda artifact: artifact.id)

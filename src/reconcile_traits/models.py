"""Core resource models for reconcile-traits.

This module defines the typed dataclasses and enumerations describing the
resources a reconciliation pass operates on:

- **Phases**: IntegrationPhase, IntegrationContextPhase
- **Resources**: Integration, IntegrationContext (the build context)
- **Build output**: Project, Artifact
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class IntegrationPhase(str, enum.Enum):
    """Lifecycle phase of an Integration resource."""

    NONE = ""
    BUILDING_CONTEXT = "Building Context"
    BUILDING_IMAGE = "Building Image"
    DEPLOYING = "Deploying"
    RUNNING = "Running"
    ERROR = "Error"


class IntegrationContextPhase(str, enum.Enum):
    """Lifecycle phase of an IntegrationContext (build context) resource."""

    NONE = ""
    BUILDING = "Building"
    READY = "Ready"
    ERROR = "Error"


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@dataclass
class IntegrationSpec:
    """User-authored part of an Integration."""

    dependencies: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)


@dataclass
class IntegrationStatus:
    phase: IntegrationPhase = IntegrationPhase.NONE


@dataclass
class Integration:
    """A running or deploying integration.

    ``spec.dependencies`` is semantically a set but kept in lexicographic
    order so that two passes over an unchanged resource serialize the same.
    """

    name: str
    spec: IntegrationSpec = field(default_factory=IntegrationSpec)
    status: IntegrationStatus = field(default_factory=IntegrationStatus)


@dataclass
class IntegrationContextSpec:
    dependencies: list[str] = field(default_factory=list)


@dataclass
class IntegrationContextStatus:
    phase: IntegrationContextPhase = IntegrationContextPhase.NONE


@dataclass
class IntegrationContext:
    """An immutable build definition shared by integrations with the same dependencies."""

    name: str
    spec: IntegrationContextSpec = field(default_factory=IntegrationContextSpec)
    status: IntegrationContextStatus = field(default_factory=IntegrationContextStatus)


# Alias matching the role the resource plays during a pass.
BuildContext = IntegrationContext


# ---------------------------------------------------------------------------
# Build output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Artifact:
    """A resolved library and the path it is copied to inside the image."""

    id: str
    location: str
    target: str


@dataclass
class Project:
    """Maven-style project description produced by a generation step."""

    group_id: str
    artifact_id: str
    version: str
    runtime: str = "jvm"
    dependencies: list[str] = field(default_factory=list)
    dependency_management: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    "Artifact",
    "BuildContext",
    "Integration",
    "IntegrationContext",
    "IntegrationContextPhase",
    "IntegrationContextSpec",
    "IntegrationContextStatus",
    "IntegrationPhase",
    "IntegrationSpec",
    "IntegrationStatus",
    "Project",
]

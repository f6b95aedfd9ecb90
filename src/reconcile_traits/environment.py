"""Per-pass reconciliation environment shared by all traits."""

from __future__ import annotations

from dataclasses import dataclass, field

from reconcile_traits.builder import StepRegistry
from reconcile_traits.models import (
    Artifact,
    Integration,
    IntegrationContext,
    IntegrationContextPhase,
    IntegrationPhase,
    Project,
)

__all__ = ["Environment"]


@dataclass
class Environment:
    """Mutable context for one reconciliation pass.

    Only one resource is the target of a pass. Both references may be set
    when the context is carried along as a stage marker for an integration,
    but traits key their behaviour on the phase of the resource they act on.

    The environment is rebuilt for every pass; nothing on it survives except
    what traits write back into the resources themselves.
    """

    integration: Integration | None = None
    context: IntegrationContext | None = None
    env_vars: dict[str, str] = field(default_factory=dict)
    steps: StepRegistry = field(default_factory=StepRegistry)
    executed_traits: list[str] = field(default_factory=list)
    # Filled in by build steps.
    project: Project | None = None
    artifacts: list[Artifact] = field(default_factory=list)
    build_properties: dict[str, str] = field(default_factory=dict)

    def integration_in_phase(self, phase: IntegrationPhase) -> bool:
        return self.integration is not None and self.integration.status.phase == phase

    def context_in_phase(self, phase: IntegrationContextPhase) -> bool:
        return self.context is not None and self.context.status.phase == phase

"""reconcile-traits -- phase-gated traits that configure resources during reconciliation."""

from __future__ import annotations

from reconcile_traits.builder import BuildStep, StepRegistry, build, phase_after
from reconcile_traits.catalog import Catalog
from reconcile_traits.environment import Environment
from reconcile_traits.errors import ApplyError, ConfigValidationError, StepError
from reconcile_traits.trait import BaseTrait, Trait, TraitConfig
from reconcile_traits.traits import SpringBootTrait
from reconcile_traits.util import add_sorted_unique, add_unique

__version__ = "0.1.0"

__all__ = [
    "ApplyError",
    "BaseTrait",
    "BuildStep",
    "Catalog",
    "ConfigValidationError",
    "Environment",
    "SpringBootTrait",
    "StepError",
    "StepRegistry",
    "Trait",
    "TraitConfig",
    "__version__",
    "add_sorted_unique",
    "add_unique",
    "build",
    "phase_after",
]

"""Trait catalog -- applies an ordered set of traits to one environment."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from reconcile_traits.environment import Environment
from reconcile_traits.errors import ApplyError
from reconcile_traits.trait import Trait, TraitConfig
from reconcile_traits.traits import BUILTIN_TRAITS

__all__ = ["Catalog", "is_active"]

log = logging.getLogger(__name__)


def is_active(trait: Trait) -> bool:
    """Return True if *trait* should take part in a pass.

    Explicit enablement always wins. An automatic trait also runs when the
    user left its flag unset, but not when they switched it off.
    """
    if trait.is_enabled():
        return True
    if not trait.is_auto():
        return False
    return trait.enabled is None


class Catalog:
    """Ordered collection of traits applied during a reconciliation pass."""

    def __init__(self, traits: Iterable[Trait]) -> None:
        self._traits: list[Trait] = []
        seen: set[str] = set()
        for trait in traits:
            if trait.id in seen:
                msg = f"Duplicate trait id: {trait.id}"
                raise ValueError(msg)
            seen.add(trait.id)
            self._traits.append(trait)

    @classmethod
    def default(cls, configs: Mapping[str, TraitConfig] | None = None) -> Catalog:
        """Build the catalog of built-in traits from per-trait configuration."""
        resolved = dict(configs or {})
        traits = []
        for trait_cls in BUILTIN_TRAITS:
            trait = trait_cls()
            if trait.id in resolved:
                trait = trait_cls(resolved.pop(trait.id))
            traits.append(trait)
        if resolved:
            msg = f"Unknown trait ids: {', '.join(sorted(resolved))}"
            raise KeyError(msg)
        return cls(traits)

    @property
    def traits(self) -> list[Trait]:
        return list(self._traits)

    def trait_ids(self) -> list[str]:
        return [trait.id for trait in self._traits]

    def get(self, trait_id: str) -> Trait:
        for trait in self._traits:
            if trait.id == trait_id:
                return trait
        msg = f"Unknown trait id: {trait_id}"
        raise KeyError(msg)

    def apply(self, env: Environment) -> list[str]:
        """Run one pass over *env*.

        Traits are applied in catalog order. The first failure stops the pass
        and is raised as an :class:`ApplyError`; changes already made are not
        rolled back.

        Returns:
            Ids of the traits applied during this pass.
        """
        applied: list[str] = []
        for trait in self._traits:
            if not is_active(trait):
                log.debug("Trait %s is not active", trait.id)
                continue
            if not trait.applies_to(env):
                log.debug("Trait %s does not apply to the current phase", trait.id)
                continue

            log.info("Applying trait %s", trait.id)
            try:
                trait.apply(env)
            except ApplyError:
                log.error("Trait %s failed, aborting pass", trait.id)
                raise
            except Exception as exc:
                log.error("Trait %s failed, aborting pass: %s", trait.id, exc)
                raise ApplyError(trait.id, str(exc)) from exc

            applied.append(trait.id)
            env.executed_traits.append(trait.id)
        return applied

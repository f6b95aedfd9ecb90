"""Built-in trait implementations."""

from __future__ import annotations

from reconcile_traits.traits.springboot import SpringBootTrait

__all__ = ["BUILTIN_TRAITS", "SpringBootTrait"]

# Application order of the built-in traits.
BUILTIN_TRAITS = (SpringBootTrait,)

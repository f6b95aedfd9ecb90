"""Spring Boot runtime trait."""

from __future__ import annotations

import logging

from reconcile_traits import springboot
from reconcile_traits.builder import (
    INIT_PHASE,
    PROJECT_BUILD_PHASE,
    PROJECT_GENERATION_PHASE,
    BuildStep,
    phase_after,
)
from reconcile_traits.environment import Environment
from reconcile_traits.models import IntegrationContextPhase, IntegrationPhase
from reconcile_traits.trait import BaseTrait, TraitConfig
from reconcile_traits.util import add_sorted_unique

__all__ = ["SpringBootTrait"]

log = logging.getLogger(__name__)

JAVA_MAIN_CLASS = "org.springframework.boot.loader.PropertiesLauncher"
LOADER_PATH = "/deployments/dependencies/"


class SpringBootTrait(BaseTrait):
    """Switch an integration to the Spring Boot runtime.

    The trait is never automatic and stays off until explicitly enabled. It
    acts in three places:

    - new integration (phase unset): declares the ``runtime:spring-boot``
      dependency;
    - build context ``Building``: adds the spring-boot initialization and
      dependency steps and takes over project generation;
    - integration ``Deploying``: points the launcher at the spring-boot
      main class and the dependencies directory.
    """

    auto_configurable = False

    def __init__(self, config: TraitConfig | None = None) -> None:
        super().__init__("springboot", config)

    def is_auto(self) -> bool:
        return False

    def applies_to(self, env: Environment) -> bool:
        if env.context_in_phase(IntegrationContextPhase.BUILDING):
            return True
        if env.integration_in_phase(IntegrationPhase.DEPLOYING):
            return True
        return env.integration_in_phase(IntegrationPhase.NONE)

    def apply(self, env: Environment) -> None:
        # At most one branch fires per call.
        if env.context_in_phase(IntegrationContextPhase.BUILDING):
            self._configure_build(env)
        elif env.integration is not None and env.integration_in_phase(IntegrationPhase.DEPLOYING):
            env.env_vars["JAVA_MAIN_CLASS"] = JAVA_MAIN_CLASS
            env.env_vars["LOADER_PATH"] = LOADER_PATH
        elif env.integration is not None and env.integration_in_phase(IntegrationPhase.NONE):
            dependencies = env.integration.spec.dependencies
            add_sorted_unique(dependencies, springboot.RUNTIME_DEPENDENCY)
            log.debug("Dependencies of %s: %s", env.integration.name, dependencies)

    def _configure_build(self, env: Environment) -> None:
        added = (
            BuildStep("initialize/spring-boot", INIT_PHASE, springboot.initialize),
            BuildStep(
                "build/compute-boot-dependencies",
                phase_after(PROJECT_BUILD_PHASE),
                springboot.compute_dependencies,
            ),
        )
        for step in added:
            if not env.steps.contains(step.name):
                env.steps.append(step)
        replaced = env.steps.replace_at_phase(
            PROJECT_GENERATION_PHASE,
            BuildStep("generate/spring-boot", PROJECT_GENERATION_PHASE, springboot.generate_project),
        )
        if not replaced:
            log.warning("No project generation step to replace for spring-boot")

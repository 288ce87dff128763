"""Selects the limit profile that applies to a configured agent count."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from buildlimits.limits.models import EnvironmentProfile, build_default_profile
from buildlimits.platform import Platform, default_platform

logger = structlog.get_logger(__name__)


def select(
    catalog: Iterable[EnvironmentProfile],
    requested_agents: int,
    *,
    platform: Platform | None = None,
    log: Any = None,
) -> EnvironmentProfile:
    """Return the first profile whose range holds ``requested_agents``.

    Ranges are exclusive at ``min`` and inclusive at ``max``. When nothing
    matches the hard-coded default profile is returned, so this never fails.
    A RAM shortfall against the matched profile is only logged.
    """
    platform = platform or default_platform()
    log = log or logger

    for profile in catalog:
        agents = profile.agent_range
        if agents.contains(requested_agents):
            log.info(
                "limits_selected",
                min_agents=agents.min,
                max_agents=agents.max,
                requested_agents=requested_agents,
            )
            ram = platform.ram_megabytes()
            if ram < profile.recommended_ram_megabytes:
                log.warning(
                    "ram_below_recommended",
                    detected_mb=ram,
                    recommended_mb=profile.recommended_ram_megabytes,
                    requested_agents=requested_agents,
                )
            return profile

    log.info("limits_default", requested_agents=requested_agents)
    return build_default_profile(platform.word_size())


class LimitSelector:
    """Binds a catalog to the platform and logger used for selection."""

    def __init__(
        self,
        catalog: Iterable[EnvironmentProfile],
        platform: Platform | None = None,
        log: Any = None,
    ) -> None:
        self._catalog = tuple(catalog)
        self._platform = platform or default_platform()
        self._log = log

    def select(self, requested_agents: int) -> EnvironmentProfile:
        return select(self._catalog, requested_agents, platform=self._platform, log=self._log)

    def initial(self) -> EnvironmentProfile:
        """Limits for a process with no agent limit configured."""
        return self.select(0)

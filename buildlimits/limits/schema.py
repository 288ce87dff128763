"""Limit spec schema with Pydantic validation and default overlay."""

from __future__ import annotations

import math
import re
from datetime import timedelta
from decimal import Decimal
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from buildlimits.exceptions import SpecError
from buildlimits.limits.models import (
    AgentRange,
    CacheLimits,
    EnvironmentProfile,
    RateLimit,
    ServerLimits,
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_NANOS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_NANOS_PER_SECOND = _UNIT_NANOS["s"]


def _invalid(value: Any) -> ValueError:
    return ValueError(f"invalid duration: {value!r}")


def _from_nanos(nanos: Decimal, value: Any) -> timedelta:
    """Exact conversion; durations finer than a microsecond are rejected."""
    if nanos % 1000 != 0:
        msg = f"invalid duration: {value!r} is finer than one microsecond"
        raise ValueError(msg)
    try:
        return timedelta(microseconds=int(nanos // 1000))
    except OverflowError as exc:
        raise _invalid(value) from exc


def parse_duration(value: Any) -> timedelta:
    """Parse a Go-style duration (``"5ms"``, ``"1m30s"``) or a number of seconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise _invalid(value)
    if isinstance(value, int | float):
        if isinstance(value, float) and not math.isfinite(value):
            raise _invalid(value)
        return _from_nanos(Decimal(str(value)) * _NANOS_PER_SECOND, value)
    if not isinstance(value, str):
        raise _invalid(value)

    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)

    total = Decimal(0)
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += Decimal(match.group(1)) * _UNIT_NANOS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise _invalid(value)
    return _from_nanos(sign * total, value)


Duration = Annotated[timedelta, BeforeValidator(parse_duration)]


class _SpecModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def present(self, *exclude: str) -> dict[str, Any]:
        """Fields the spec author actually wrote, skipping explicit nulls."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in exclude and getattr(self, name) is not None
        }


class AgentRangeSpec(_SpecModel):
    min: int | None = None
    max: int | None = None


class RateLimitSpec(_SpecModel):
    interval: Duration | None = None
    burst: int | None = None
    max: int | None = None
    max_body_bytes: int | None = Field(default=None, alias="max_body_byte_size")


class ServerLimitsSpec(_SpecModel):
    policy_throttle: Duration | None = None
    max_connections: int | None = None
    checkin: RateLimitSpec | None = Field(default=None, alias="checkin_limit")
    artifact: RateLimitSpec | None = Field(default=None, alias="artifact_limit")
    enroll: RateLimitSpec | None = Field(default=None, alias="enroll_limit")
    ack: RateLimitSpec | None = Field(default=None, alias="ack_limit")


class CacheLimitsSpec(_SpecModel):
    num_counters: int | None = None
    max_cost_bytes: int | None = Field(default=None, alias="max_cost")


class ProfileSpec(_SpecModel):
    """One YAML limit spec document; every field is optional."""

    agent_range: AgentRangeSpec | None = Field(default=None, alias="num_agents")
    recommended_ram_megabytes: int | None = Field(default=None, alias="recommended_min_ram")
    server: ServerLimitsSpec | None = Field(default=None, alias="server_limits")
    cache: CacheLimitsSpec | None = Field(default=None, alias="cache_limits")

    @classmethod
    def from_yaml(cls, yaml_str: str | bytes) -> ProfileSpec:
        """Parse a YAML document into a ProfileSpec.

        An empty document yields an empty spec. Anything other than a
        mapping at the top level is rejected.
        """
        raw = yaml.safe_load(yaml_str)
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            msg = f"expected a mapping at the top level, got {type(raw).__name__}"
            raise SpecError(msg)
        return cls.model_validate(raw)


_RATE_LIMIT_FIELDS = ("checkin", "artifact", "enroll", "ack")


def overlay_agent_range(base: AgentRange, spec: AgentRangeSpec | None) -> AgentRange:
    if spec is None:
        return base
    return base.model_copy(update=spec.present())


def overlay_rate_limit(base: RateLimit, spec: RateLimitSpec | None) -> RateLimit:
    if spec is None:
        return base
    return base.model_copy(update=spec.present())


def overlay_server_limits(base: ServerLimits, spec: ServerLimitsSpec | None) -> ServerLimits:
    if spec is None:
        return base
    update = spec.present(*_RATE_LIMIT_FIELDS)
    for name in _RATE_LIMIT_FIELDS:
        update[name] = overlay_rate_limit(getattr(base, name), getattr(spec, name))
    return base.model_copy(update=update)


def overlay_cache_limits(base: CacheLimits, spec: CacheLimitsSpec | None) -> CacheLimits:
    if spec is None:
        return base
    return base.model_copy(update=spec.present())


def overlay_profile(base: EnvironmentProfile, spec: ProfileSpec) -> EnvironmentProfile:
    """Apply the fields present in ``spec`` on top of ``base``."""
    update = spec.present("agent_range", "server", "cache")
    update["agent_range"] = overlay_agent_range(base.agent_range, spec.agent_range)
    update["server"] = overlay_server_limits(base.server, spec.server)
    update["cache"] = overlay_cache_limits(base.cache, spec.cache)
    return base.model_copy(update=update)

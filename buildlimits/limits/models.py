"""Environment limit profiles and their hard-coded defaults."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict

from buildlimits.platform import max_int

DEFAULT_CACHE_NUM_COUNTERS = 500_000  # 10x the expected entry count
DEFAULT_CACHE_MAX_COST = 50 * 1024 * 1024  # 50 MiB

DEFAULT_MAX_CONNECTIONS = 0  # unlimited
DEFAULT_POLICY_THROTTLE = timedelta(milliseconds=5)

DEFAULT_CHECKIN_INTERVAL = timedelta(milliseconds=1)
DEFAULT_CHECKIN_BURST = 1000
DEFAULT_CHECKIN_MAX = 0
DEFAULT_CHECKIN_MAX_BODY = 1024 * 1024

DEFAULT_ARTIFACT_INTERVAL = timedelta(milliseconds=5)
DEFAULT_ARTIFACT_BURST = 25
DEFAULT_ARTIFACT_MAX = 50
DEFAULT_ARTIFACT_MAX_BODY = 0

DEFAULT_ENROLL_INTERVAL = timedelta(milliseconds=10)
DEFAULT_ENROLL_BURST = 100
DEFAULT_ENROLL_MAX = 50
DEFAULT_ENROLL_MAX_BODY = 512 * 1024

DEFAULT_ACK_INTERVAL = timedelta(milliseconds=10)
DEFAULT_ACK_BURST = 100
DEFAULT_ACK_MAX = 50
DEFAULT_ACK_MAX_BODY = 2 * 1024 * 1024


class AgentRange(BaseModel):
    """Agent-count bracket: ``min`` exclusive, ``max`` inclusive."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    def contains(self, agents: int) -> bool:
        return self.min < agents <= self.max


class RateLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval: timedelta
    burst: int
    max: int  # 0 = unlimited
    max_body_bytes: int  # 0 = unlimited


class ServerLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy_throttle: timedelta
    max_connections: int  # 0 = unlimited
    checkin: RateLimit
    artifact: RateLimit
    enroll: RateLimit
    ack: RateLimit


class CacheLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_counters: int
    max_cost_bytes: int


class EnvironmentProfile(BaseModel):
    """One tier of operating limits for a deployment scale."""

    model_config = ConfigDict(frozen=True)

    agent_range: AgentRange
    recommended_ram_megabytes: int = 0
    server: ServerLimits
    cache: CacheLimits


def default_cache_limits() -> CacheLimits:
    return CacheLimits(
        num_counters=DEFAULT_CACHE_NUM_COUNTERS,
        max_cost_bytes=DEFAULT_CACHE_MAX_COST,
    )


def default_server_limits() -> ServerLimits:
    return ServerLimits(
        policy_throttle=DEFAULT_POLICY_THROTTLE,
        max_connections=DEFAULT_MAX_CONNECTIONS,
        checkin=RateLimit(
            interval=DEFAULT_CHECKIN_INTERVAL,
            burst=DEFAULT_CHECKIN_BURST,
            max=DEFAULT_CHECKIN_MAX,
            max_body_bytes=DEFAULT_CHECKIN_MAX_BODY,
        ),
        artifact=RateLimit(
            interval=DEFAULT_ARTIFACT_INTERVAL,
            burst=DEFAULT_ARTIFACT_BURST,
            max=DEFAULT_ARTIFACT_MAX,
            max_body_bytes=DEFAULT_ARTIFACT_MAX_BODY,
        ),
        enroll=RateLimit(
            interval=DEFAULT_ENROLL_INTERVAL,
            burst=DEFAULT_ENROLL_BURST,
            max=DEFAULT_ENROLL_MAX,
            max_body_bytes=DEFAULT_ENROLL_MAX_BODY,
        ),
        ack=RateLimit(
            interval=DEFAULT_ACK_INTERVAL,
            burst=DEFAULT_ACK_BURST,
            max=DEFAULT_ACK_MAX,
            max_body_bytes=DEFAULT_ACK_MAX_BODY,
        ),
    )


def build_default_profile(word_size: int) -> EnvironmentProfile:
    """Fallback profile covering every agent count up to the platform's max int."""
    return EnvironmentProfile(
        agent_range=AgentRange(min=0, max=max_int(word_size)),
        recommended_ram_megabytes=0,
        server=default_server_limits(),
        cache=default_cache_limits(),
    )

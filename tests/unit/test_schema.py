from datetime import timedelta

import pydantic
import pytest

from buildlimits.exceptions import SpecError
from buildlimits.limits.models import build_default_profile, default_server_limits
from buildlimits.limits.schema import (
    ProfileSpec,
    RateLimitSpec,
    ServerLimitsSpec,
    overlay_profile,
    overlay_rate_limit,
    overlay_server_limits,
    parse_duration,
)


@pytest.mark.unit
class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("5ms", timedelta(milliseconds=5)),
            ("1m30s", timedelta(seconds=90)),
            ("250us", timedelta(microseconds=250)),
            ("1.5h", timedelta(minutes=90)),
            ("0", timedelta(0)),
            ("-2s", timedelta(seconds=-2)),
            (2, timedelta(seconds=2)),
            (0.5, timedelta(milliseconds=500)),
        ],
    )
    def test_valid(self, value: object, expected: timedelta) -> None:
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "ms", "5", "5x", "5 ms", "fast", True, None, [1]])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValueError, match="invalid duration"):
            parse_duration(value)

    @pytest.mark.parametrize("value", ["1000000000h", 100_000_000_000_000, float("inf")])
    def test_too_large(self, value: object) -> None:
        with pytest.raises(ValueError, match="invalid duration"):
            parse_duration(value)

    @pytest.mark.parametrize("value", ["400ns", "1500ns", "1us1ns", 1e-7])
    def test_finer_than_microsecond(self, value: object) -> None:
        with pytest.raises(ValueError, match="finer than one microsecond"):
            parse_duration(value)

    def test_whole_microseconds_in_nanoseconds(self) -> None:
        assert parse_duration("2000ns") == timedelta(microseconds=2)
        assert parse_duration("1.000001s") == timedelta(seconds=1, microseconds=1)


@pytest.mark.unit
class TestProfileSpec:
    def test_empty_document(self) -> None:
        spec = ProfileSpec.from_yaml("")
        assert spec.model_fields_set == set()

    def test_wire_names(self) -> None:
        spec = ProfileSpec.from_yaml(
            """
num_agents: {min: 5, max: 50}
recommended_min_ram: 1024
cache_limits: {num_counters: 10, max_cost: 2048}
server_limits:
  ack_limit: {max_body_byte_size: 99}
"""
        )
        assert spec.agent_range is not None
        assert spec.agent_range.max == 50
        assert spec.recommended_ram_megabytes == 1024
        assert spec.cache is not None
        assert spec.cache.max_cost_bytes == 2048
        assert spec.server is not None
        assert spec.server.ack is not None
        assert spec.server.ack.max_body_bytes == 99

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(SpecError, match="mapping"):
            ProfileSpec.from_yaml("- 1\n- 2\n")

    def test_rejects_unknown_keys(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ProfileSpec.from_yaml("num_agent:\n  max: 5\n")

    def test_rejects_bad_types(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ProfileSpec.from_yaml("server_limits:\n  checkin_limit:\n    burst: lots\n")

    def test_rejects_python_field_names(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ProfileSpec.from_yaml("server_limits:\n  checkin:\n    burst: 5\n")
        with pytest.raises(pydantic.ValidationError):
            ProfileSpec.from_yaml("cache_limits:\n  max_cost_bytes: 1024\n")


@pytest.mark.unit
class TestOverlay:
    def test_omitted_fields_keep_defaults(self) -> None:
        base = default_server_limits().checkin
        merged = overlay_rate_limit(base, RateLimitSpec(burst=7))
        assert merged.burst == 7
        assert merged.interval == base.interval
        assert merged.max == base.max
        assert merged.max_body_bytes == base.max_body_bytes

    def test_explicit_zero_overrides(self) -> None:
        base = default_server_limits().checkin
        merged = overlay_rate_limit(base, RateLimitSpec(burst=0, max_body_byte_size=0))
        assert merged.burst == 0
        assert merged.max_body_bytes == 0

    def test_explicit_null_keeps_default(self) -> None:
        base = default_server_limits().checkin
        merged = overlay_rate_limit(base, RateLimitSpec.model_validate({"burst": None}))
        assert merged.burst == base.burst

    def test_missing_section_keeps_defaults(self) -> None:
        base = default_server_limits()
        assert overlay_server_limits(base, None) is base

    def test_server_overlay_reaches_nested_limits(self) -> None:
        base = default_server_limits()
        spec = ServerLimitsSpec.model_validate(
            {"max_connections": 0, "enroll_limit": {"interval": "1s"}}
        )
        merged = overlay_server_limits(base, spec)
        assert merged.max_connections == 0
        assert merged.enroll.interval == timedelta(seconds=1)
        assert merged.enroll.burst == base.enroll.burst
        assert merged.checkin == base.checkin

    def test_profile_overlay(self) -> None:
        base = build_default_profile(64)
        spec = ProfileSpec.from_yaml("num_agents:\n  max: 50\nrecommended_min_ram: 512\n")
        merged = overlay_profile(base, spec)
        assert merged.agent_range.min == 0
        assert merged.agent_range.max == 50
        assert merged.recommended_ram_megabytes == 512
        assert merged.server == base.server
        assert merged.cache == base.cache
        assert base.agent_range.max == 2**63 - 1

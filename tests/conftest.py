"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from buildlimits.config.settings import get_settings
from buildlimits.platform import StaticPlatform

REPO_SPECS_DIR = Path(__file__).resolve().parent.parent / "specs"

SMALL_SPEC = """
num_agents:
  min: 0
  max: 10
recommended_min_ram: 512
server_limits:
  max_connections: 20
  checkin_limit:
    interval: 50ms
    burst: 5
"""

LARGE_SPEC = """
num_agents:
  min: 10
  max: 100
recommended_min_ram: 2048
cache_limits:
  num_counters: 4000
  max_cost: 4194304
server_limits:
  policy_throttle: 10ms
  max_connections: 200
"""


@pytest.fixture(autouse=True)
def _reset_state():
    """Drop cached settings and structlog config between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture()
def platform() -> StaticPlatform:
    """A 64-bit host with plenty of RAM."""
    return StaticPlatform(ram=65536, bits=64)


@pytest.fixture()
def spec_dir(tmp_path: Path) -> Path:
    """A spec directory holding two adjacent tiers."""
    directory = tmp_path / "specs"
    directory.mkdir()
    (directory / "a_small.yml").write_text(SMALL_SPEC)
    (directory / "b_large.yml").write_text(LARGE_SPEC)
    return directory


@pytest.fixture()
def repo_specs_dir() -> Path:
    """The tier specs shipped with the repository."""
    return REPO_SPECS_DIR

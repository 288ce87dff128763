"""Builds the immutable, ordered catalog of environment profiles."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from buildlimits.exceptions import SpecError
from buildlimits.generator.packer import pack, unpack
from buildlimits.limits.models import EnvironmentProfile, build_default_profile
from buildlimits.limits.schema import ProfileSpec, overlay_profile
from buildlimits.platform import Platform, default_platform

logger = structlog.get_logger(__name__)


def parse_profile(name: str, content: str | bytes, word_size: int) -> EnvironmentProfile:
    """Parse one raw spec document onto a fresh default profile."""
    try:
        spec = ProfileSpec.from_yaml(content)
    except yaml.YAMLError as exc:
        msg = f"Cannot read spec from {name}: {exc}"
        raise SpecError(msg) from exc
    except (ValidationError, SpecError) as exc:
        msg = f"Cannot unpack spec from {name}: {exc}"
        raise SpecError(msg) from exc
    return overlay_profile(build_default_profile(word_size), spec)


class Catalog:
    """Ordered sequence of profiles, fixed once constructed."""

    def __init__(self, profiles: Iterable[EnvironmentProfile] = ()) -> None:
        self._profiles = tuple(profiles)

    @classmethod
    def from_records(
        cls, records: Mapping[str, str | bytes], platform: Platform | None = None
    ) -> Catalog:
        """Build a catalog from ``{name: content}`` records in iteration order.

        Any record that fails to parse aborts the whole construction.
        """
        platform = platform or default_platform()
        word_size = platform.word_size()
        profiles = [parse_profile(name, content, word_size) for name, content in records.items()]
        logger.debug("catalog_built", profile_count=len(profiles), word_size=word_size)
        return cls(profiles)

    @classmethod
    def from_pack(cls, data: str, platform: Platform | None = None) -> Catalog:
        """Build a catalog from a blob produced by the packer."""
        return cls.from_records(unpack(data), platform=platform)

    @classmethod
    def from_directory(cls, directory: str | Path, platform: Platform | None = None) -> Catalog:
        """Build a catalog straight from a spec directory."""
        return cls.from_pack(pack(directory).data, platform=platform)

    @property
    def profiles(self) -> tuple[EnvironmentProfile, ...]:
        return self._profiles

    def __iter__(self) -> Iterator[EnvironmentProfile]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __getitem__(self, index: int) -> EnvironmentProfile:
        return self._profiles[index]

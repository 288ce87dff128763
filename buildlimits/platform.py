"""Host platform queries used when sizing limits."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Protocol

import structlog

from buildlimits.config.settings import get_settings
from buildlimits.types import WordSize

logger = structlog.get_logger(__name__)


class Platform(Protocol):
    """Environment queries the limit selector depends on."""

    def ram_megabytes(self) -> int: ...

    def word_size(self) -> int: ...


class HostPlatform:
    """Reads memory and pointer width from the running interpreter's host."""

    def ram_megabytes(self) -> int:
        try:
            page_size = os.sysconf("SC_PAGE_SIZE")
            pages = os.sysconf("SC_PHYS_PAGES")
        except (AttributeError, ValueError, OSError):
            # sysconf is unavailable on some platforms (e.g. Windows)
            logger.debug("ram_detection_unavailable")
            return 0
        return page_size * pages // 1024 // 1024

    def word_size(self) -> int:
        return struct.calcsize("P") * 8


@dataclass(frozen=True, slots=True)
class StaticPlatform:
    """Fixed answers, for cross-target generation and tests."""

    ram: int = 0
    bits: int = WordSize.BITS_64

    def ram_megabytes(self) -> int:
        return self.ram

    def word_size(self) -> int:
        return self.bits


def max_int(word_size: int) -> int:
    """Largest signed integer representable in ``word_size`` bits."""
    if word_size not in tuple(WordSize):
        msg = f"Unsupported word size: {word_size}"
        raise ValueError(msg)
    return 2 ** (word_size - 1) - 1


def default_platform(target_word_size: int | None = None) -> Platform:
    """Host platform, optionally pinned to a target word size.

    Without an explicit target, ``BUILDLIMITS_TARGET_WORD_SIZE`` applies.
    """
    if target_word_size is None:
        target_word_size = get_settings().target_word_size
    if target_word_size is None:
        return HostPlatform()
    return _TargetPlatform(int(target_word_size))


class _TargetPlatform(HostPlatform):
    def __init__(self, bits: int) -> None:
        self._bits = bits

    def word_size(self) -> int:
        return self._bits

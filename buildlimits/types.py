"""Enums and type aliases for buildlimits."""

from enum import IntEnum, StrEnum


class LicenseType(StrEnum):
    ELASTIC = "elastic"
    ASL2 = "asl2"


class WordSize(IntEnum):
    BITS_32 = 32
    BITS_64 = 64

"""Packs a directory of limit specs into a single embeddable string."""

from __future__ import annotations

import base64
import binascii
import json
import zlib
from dataclasses import dataclass
from pathlib import Path

import structlog

from buildlimits.exceptions import PackError

logger = structlog.get_logger(__name__)

SPEC_SUFFIXES = (".yml", ".yaml")


@dataclass(frozen=True, slots=True)
class PackResult:
    """Encoded blob plus the names of the files it holds, in pack order."""

    data: str
    files: tuple[str, ...]


def pack(directory: str | Path) -> PackResult:
    """Pack every YAML file directly under ``directory`` in name order."""
    root = Path(directory)
    if not root.is_dir():
        msg = f"Spec directory not found: {root}"
        raise PackError(msg)

    paths = sorted(p for p in root.iterdir() if p.is_file() and p.suffix in SPEC_SUFFIXES)
    try:
        contents = {p.name: base64.b64encode(p.read_bytes()).decode("ascii") for p in paths}
    except OSError as exc:
        msg = f"Cannot read spec files from {root}: {exc}"
        raise PackError(msg) from exc

    encoded = json.dumps(contents).encode("utf-8")
    data = base64.b64encode(zlib.compress(encoded, 9)).decode("ascii")
    logger.info("specs_packed", directory=str(root), file_count=len(paths), size=len(data))
    return PackResult(data=data, files=tuple(contents))


def unpack(data: str) -> dict[str, bytes]:
    """Reverse :func:`pack`, preserving file order."""
    try:
        raw = zlib.decompress(base64.b64decode(data, validate=True))
        contents = json.loads(raw)
    except (binascii.Error, zlib.error, ValueError) as exc:
        msg = f"Corrupt spec pack: {exc}"
        raise PackError(msg) from exc
    if not isinstance(contents, dict):
        msg = "Corrupt spec pack: expected a mapping of file names"
        raise PackError(msg)

    files: dict[str, bytes] = {}
    for name, encoded in contents.items():
        try:
            files[name] = base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as exc:
            msg = f"Corrupt spec pack entry {name}: {exc}"
            raise PackError(msg) from exc
    return files

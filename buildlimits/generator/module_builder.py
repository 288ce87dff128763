"""Generates the Python module that embeds the packed limit specs."""

from __future__ import annotations

import ast
from pathlib import Path

import structlog

from buildlimits.exceptions import GeneratorError
from buildlimits.generator.licenses import as_comment, find_license
from buildlimits.generator.packer import PackResult, pack

logger = structlog.get_logger(__name__)

GENERATED_MARKER = "# Code generated by buildlimits - DO NOT EDIT."
CHUNK_SIZE = 76


class ModuleBuilder:
    """Renders a self-contained limits module from a PackResult."""

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size

    def build(self, packed: PackResult, license_header: str) -> str:
        """Render the module source and check that it parses."""
        lines: list[str] = [
            *as_comment(license_header),
            "",
            GENERATED_MARKER,
            "",
            '"""Embedded environment limit profiles."""',
            "",
            "from __future__ import annotations",
            "",
            "from buildlimits.limits.catalog import Catalog",
            "from buildlimits.limits.models import EnvironmentProfile",
            "from buildlimits.limits.selector import select",
            "from buildlimits.platform import Platform",
            "",
        ]
        lines.extend(self._files_block(packed.files))
        lines.extend(self._pack_block(packed.data))
        lines.extend(self._functions_block())

        source = "\n".join(lines) + "\n"
        self._check_syntax(source)
        logger.info("module_rendered", files=len(packed.files), lines=len(lines))
        return source

    def _files_block(self, files: tuple[str, ...]) -> list[str]:
        lines = ["# Packed files"]
        lines.extend(f"# {name}" for name in files)
        lines.append("FILES: tuple[str, ...] = (")
        lines.extend(f"    {name!r}," for name in files)
        lines.extend([")", ""])
        return lines

    def _pack_block(self, data: str) -> list[str]:
        chunks = [data[i : i + self._chunk_size] for i in range(0, len(data), self._chunk_size)]
        if not chunks:
            return ['PACK = ""', "", ""]
        lines = ["PACK = ("]
        lines.extend(f'    "{chunk}"' for chunk in chunks)
        lines.extend([")", "", ""])
        return lines

    def _functions_block(self) -> list[str]:
        return [
            "def load_catalog(platform: Platform | None = None) -> Catalog:",
            '    """Unpack the embedded specs. An invalid spec raises SpecError."""',
            "    return Catalog.from_pack(PACK, platform=platform)",
            "",
            "",
            "def load_limits(",
            "    catalog: Catalog, agent_limit: int = 0, platform: Platform | None = None",
            ") -> EnvironmentProfile:",
            '    """Limits for the configured agent count, or the defaults."""',
            "    return select(catalog, agent_limit, platform=platform)",
            "",
            "",
            "def init_limits(catalog: Catalog, platform: Platform | None = None) -> EnvironmentProfile:",
            "    return load_limits(catalog, 0, platform=platform)",
        ]

    def _check_syntax(self, source: str) -> None:
        try:
            ast.parse(source)
        except SyntaxError as exc:
            msg = f"Generated module is not valid Python: {exc}"
            raise GeneratorError(msg) from exc


def generate(input_dir: str | Path, license_name: str) -> str:
    """Pack ``input_dir`` and render the limits module under ``license_name``."""
    header = find_license(license_name)
    packed = pack(input_dir)
    return ModuleBuilder().build(packed, header)

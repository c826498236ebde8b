"""
Converter from the project model back to EWP project XML.

Output follows the element order IAR Embedded Workbench writes: version,
configurations, groups, then files. Opaque blocks are emitted verbatim.
"""

from __future__ import annotations

import logging
from typing import List
from xml.etree import ElementTree as ET
from xml.sax.saxutils import escape

from ..core.project_model import EwpProject, FileEntry, OpaqueBlock
from ..exceptions import EncodeError
from .ewp_to_model import (
    CONFIGURATION_TAG,
    EXCLUDED_TAG,
    FILE_TAG,
    GROUP_TAG,
    NAME_TAG,
    ROOT_TAG,
    VERSION_TAG,
)
from .xml_bridge import DEFAULT_ENCODING


# Parsers normalize a literal carriage return in text to a newline
TEXT_ENTITIES = {"\r": "&#13;"}

logger = logging.getLogger(__name__)


class ModelToEwpConverter:
    """
    Converts EwpProject models to EWP project documents.

    The assembled document is parsed once more before it is returned, so
    an opaque block that would corrupt the document raises EncodeError
    instead of producing unreadable output.
    """

    def __init__(self, indent: str = "\t"):
        self.indent = indent

    def convert(self, project: EwpProject) -> bytes:
        """Convert an EwpProject to document bytes."""
        parts: List[str] = []

        if project.encoding:
            parts.append(f'<?xml version="1.0" encoding="{project.encoding}"?>\n\n')

        parts.append(f"<{ROOT_TAG}>\n")
        parts.append(
            f"{self.indent}<{VERSION_TAG}>{project.file_version}</{VERSION_TAG}>\n"
        )

        for block in project.configurations:
            parts.append(self._render_block(CONFIGURATION_TAG, block))
        for block in project.groups:
            parts.append(self._render_block(GROUP_TAG, block))
        for entry in project.files:
            parts.append(self._render_file(entry))

        parts.append(f"</{ROOT_TAG}>\n")
        text = "".join(parts)

        encoding = project.encoding or DEFAULT_ENCODING
        try:
            data = text.encode(encoding)
        except (UnicodeEncodeError, LookupError) as e:
            raise EncodeError(f"Cannot encode project as {encoding}: {e}") from e

        self._validate_output(data)
        logger.debug("Encoded project with %d files (%d bytes)", len(project.files), len(data))
        return data

    def _render_block(self, tag: str, block: OpaqueBlock) -> str:
        """Re-emit an opaque block exactly as it was read."""
        try:
            ET.fromstring(f"<{tag}>{block.raw_markup}</{tag}>")
        except ET.ParseError as e:
            raise EncodeError(f"<{tag}> block is not a well-formed XML fragment: {e}") from e
        return f"{self.indent}<{tag}>{block.raw_markup}</{tag}>\n"

    def _render_file(self, entry: FileEntry) -> str:
        i = self.indent
        lines = [
            f"{i}<{FILE_TAG}>",
            f"{i}{i}<{NAME_TAG}>{escape(entry.path, TEXT_ENTITIES)}</{NAME_TAG}>",
        ]
        if entry.exclusions is not None:
            lines.append(f"{i}{i}<{EXCLUDED_TAG}>")
            for config in entry.exclusions:
                lines.append(f"{i}{i}{i}<{CONFIGURATION_TAG}>{escape(config, TEXT_ENTITIES)}</{CONFIGURATION_TAG}>")
            lines.append(f"{i}{i}</{EXCLUDED_TAG}>")
        lines.append(f"{i}</{FILE_TAG}>")
        return "\n".join(lines) + "\n"

    def _validate_output(self, data: bytes) -> None:
        try:
            ET.fromstring(data)
        except ET.ParseError as e:
            raise EncodeError(f"Encoded project is not well-formed: {e}") from e


def encode(project: EwpProject) -> bytes:
    """Encode a project model."""
    return ModelToEwpConverter().convert(project)

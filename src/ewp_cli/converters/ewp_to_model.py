"""
Converter from EWP project XML to the project model.

The typed parts of the document (version, files, exclusions) are read with
ElementTree. Configuration and group elements are not interpreted; their raw
inner XML is taken from the source by the XML bridge.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Union
from xml.etree import ElementTree as ET
from xml.parsers import expat

from ..core.project_model import EwpProject, FileEntry, OpaqueBlock
from ..exceptions import DecodeError
from .xml_bridge import XMLBridge


ROOT_TAG = "project"
VERSION_TAG = "fileVersion"
CONFIGURATION_TAG = "configuration"
GROUP_TAG = "group"
FILE_TAG = "file"
NAME_TAG = "name"
EXCLUDED_TAG = "excluded"

KNOWN_TAGS = {VERSION_TAG, CONFIGURATION_TAG, GROUP_TAG, FILE_TAG}

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

logger = logging.getLogger(__name__)


class EwpToModelConverter:
    """
    Converts EWP project documents to EwpProject models.

    Decoding is all-or-nothing: any problem raises DecodeError and no
    partial project is returned.
    """

    def __init__(self, bridge: Optional[XMLBridge] = None):
        self.bridge = bridge or XMLBridge((CONFIGURATION_TAG, GROUP_TAG))

    def convert(self, data: Union[bytes, str]) -> EwpProject:
        """
        Convert a project document to an EwpProject.

        Returns:
            EwpProject with files in document order.
        """
        if not isinstance(data, (bytes, bytearray, str)):
            raise DecodeError(f"Expected bytes or str, got {type(data).__name__}")

        root = self._parse_root(data)
        file_version = self._parse_version(root)
        files = [self._parse_file(element) for element in root.findall(FILE_TAG)]

        for child in root:
            if child.tag not in KNOWN_TAGS:
                logger.debug("Ignoring unknown project element <%s>", child.tag)

        try:
            raw = self.bridge.extract_raw_children(data)
        except (expat.ExpatError, ValueError, LookupError) as e:
            # UnicodeDecodeError is a ValueError
            raise DecodeError(f"Failed to extract raw project blocks: {e}") from e

        project = EwpProject(
            file_version=file_version,
            configurations=[OpaqueBlock(raw_markup=x) for x in raw.get(CONFIGURATION_TAG)],
            groups=[OpaqueBlock(raw_markup=x) for x in raw.get(GROUP_TAG)],
            files=files,
            encoding=raw.declared_encoding,
        )

        logger.debug(
            "Decoded project version %d with %d files, %d configurations, %d groups",
            project.file_version,
            len(project.files),
            len(project.configurations),
            len(project.groups),
        )
        return project

    def _parse_root(self, data: Union[bytes, str]) -> ET.Element:
        """Parse the document and check the root element."""
        try:
            root = ET.fromstring(data)
        except (ET.ParseError, ValueError, LookupError) as e:
            raise DecodeError(f"Malformed project XML: {e}") from e

        if root.tag != ROOT_TAG:
            raise DecodeError(f"Expected root element <{ROOT_TAG}>, found <{root.tag}>")
        return root

    def _parse_version(self, root: ET.Element) -> int:
        version = root.find(VERSION_TAG)
        if version is None:
            raise DecodeError(f"Missing <{VERSION_TAG}> element")

        text = (version.text or "").strip()
        if not INTEGER_PATTERN.fullmatch(text):
            raise DecodeError(f"Invalid <{VERSION_TAG}> value: {text!r}")
        return int(text)

    def _parse_file(self, element: ET.Element) -> FileEntry:
        name = element.find(NAME_TAG)
        if name is None:
            raise DecodeError(f"<{FILE_TAG}> element without <{NAME_TAG}>")

        exclusions: Optional[List[str]] = None
        excluded = element.find(EXCLUDED_TAG)
        if excluded is not None:
            exclusions = [
                config.text or "" for config in excluded.findall(CONFIGURATION_TAG)
            ]

        return FileEntry(path=name.text or "", exclusions=exclusions)


def decode(data: Union[bytes, str]) -> EwpProject:
    """Decode a project document."""
    return EwpToModelConverter().convert(data)

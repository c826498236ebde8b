"""
XML bridge for handling opaque project elements.

Provides utilities for slicing the raw inner XML of selected elements out of
the source document, so that content we do not interpret can be written back
exactly as it was read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union
from xml.parsers import expat


DEFAULT_ENCODING = "utf-8"


@dataclass
class RawFragments:
    """Raw inner XML of the root's opaque children, in document order."""

    # tag -> inner xml of each occurrence
    fragments: Dict[str, List[str]] = field(default_factory=dict)

    # Encoding named by the XML declaration, if there was one
    declared_encoding: Optional[str] = None

    def get(self, tag: str) -> List[str]:
        return self.fragments.get(tag, [])


class XMLBridge:
    """
    Bridge for extracting raw XML fragments by byte offset.

    ElementTree discards the original text of an element's children, so the
    document is scanned a second time with expat and each opaque element's
    inner content is cut directly out of the input.
    """

    def __init__(self, opaque_tags: Sequence[str] = ("configuration", "group")):
        self.opaque_tags = tuple(opaque_tags)

    def extract_raw_children(self, data: Union[bytes, str]) -> RawFragments:
        """
        Extract the inner XML of every opaque child of the root element.

        Offsets are found by scanning for single-byte delimiters, so only
        ASCII-compatible encodings are supported (not UTF-16 or UTF-32).

        Raises:
            expat.ExpatError: if the data is not well-formed.
            UnicodeDecodeError: if a fragment is not valid in the document encoding.
            LookupError: if the declared encoding is unknown.
        """
        result = RawFragments(fragments={tag: [] for tag in self.opaque_tags})

        # expat always reads str input as UTF-8, whatever the declaration says
        if isinstance(data, str):
            source = data.encode(DEFAULT_ENCODING)
        else:
            source = bytes(data)

        parser = expat.ParserCreate()
        depth = 0
        current: Optional[Tuple[str, int, bool]] = None
        spans: List[Tuple[str, int, int]] = []

        def on_xml_decl(version, encoding, standalone):
            result.declared_encoding = encoding

        def on_start(tag, attrs):
            nonlocal depth, current
            depth += 1
            if depth == 2 and tag in self.opaque_tags:
                tag_end = self._find_tag_end(source, parser.CurrentByteIndex)
                self_closing = source[tag_end - 1:tag_end] == b"/"
                current = (tag, tag_end + 1, self_closing)

        def on_end(tag):
            nonlocal depth, current
            if depth == 2 and current is not None:
                name, inner_start, self_closing = current
                inner_end = inner_start if self_closing else parser.CurrentByteIndex
                spans.append((name, inner_start, inner_end))
                current = None
            depth -= 1

        parser.XmlDeclHandler = on_xml_decl
        parser.StartElementHandler = on_start
        parser.EndElementHandler = on_end
        parser.Parse(data, True)

        if isinstance(data, str):
            text_encoding = DEFAULT_ENCODING
        else:
            text_encoding = result.declared_encoding or DEFAULT_ENCODING

        for name, start, end in spans:
            result.fragments[name].append(source[start:end].decode(text_encoding))

        return result

    @staticmethod
    def _find_tag_end(source: bytes, start: int) -> int:
        """Find the index of the '>' closing the start tag at ``start``."""
        quote = None
        for index in range(start, len(source)):
            char = source[index:index + 1]
            if quote is not None:
                if char == quote:
                    quote = None
            elif char in (b'"', b"'"):
                quote = char
            elif char == b">":
                return index
        raise ValueError(f"Unterminated start tag at byte {start}")

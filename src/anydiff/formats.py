#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/anydiff/formats.py
"""Content format detection.

Collaborators that fetch content usually know a file name or a MIME type; when
neither settles the question the content itself is sniffed.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Optional

from anydiff.constants import (
    HTML_EXTENSIONS,
    MANIFEST_EXTENSIONS,
    MANIFEST_FILENAMES,
    MANIFEST_VERSION_KEY,
    XML_EXTENSIONS,
    ContentFormat,
)

logger = logging.getLogger(__name__)

_HTML_START = re.compile(r"^\s*(?:<!--.*?-->\s*)*(?:<!doctype\s+html|<html[\s>])", re.IGNORECASE | re.DOTALL)
_XML_START = re.compile(r"^\s*<\?xml[\s?]", re.IGNORECASE)
_TAG_START = re.compile(r"^\s*<[A-Za-z_][\w:.-]*[\s/>]")
_MANIFEST_START = re.compile(rf"^\s*{re.escape(MANIFEST_VERSION_KEY)}\s*:", re.IGNORECASE)


def format_from_extension(name: str) -> Optional[ContentFormat]:
    """Return the format implied by a file name, or None when unknown.

    Examples
    --------
        >>> format_from_extension("META-INF/MANIFEST.MF")
        'manifest'

    """
    path = PurePosixPath(name.replace("\\", "/"))
    if path.name.lower() in MANIFEST_FILENAMES:
        return "manifest"
    suffix = path.suffix.lower()
    if suffix in HTML_EXTENSIONS:
        return "html"
    if suffix in XML_EXTENSIONS:
        return "xml"
    if suffix in MANIFEST_EXTENSIONS:
        return "manifest"
    if suffix in {".txt", ".text", ".log", ".md", ".csv"}:
        return "plain"
    return None


def format_from_mime(mime_type: str) -> Optional[ContentFormat]:
    """Return the format implied by a MIME type, or None when unknown."""
    essence = mime_type.split(";", 1)[0].strip().lower()
    if essence in {"text/html", "application/xhtml+xml"}:
        return "html"
    if essence in {"text/xml", "application/xml"} or essence.endswith("+xml"):
        return "xml"
    if essence.startswith("text/"):
        return "plain"
    return None


def detect_format(raw: str, name: Optional[str] = None, mime_type: Optional[str] = None) -> ContentFormat:
    """Detect the format of ``raw``.

    The file name is consulted first, then the MIME type, then the content:
    an XML declaration means XML, a doctype or ``<html>`` root means HTML, any
    other leading tag means XML, and a ``Manifest-Version`` header means a
    manifest. Everything else is plain text.
    """
    detected = format_from_extension(name) if name else None
    if detected is None and mime_type:
        detected = format_from_mime(mime_type)
    if detected is None:
        detected = _sniff(raw)
    logger.debug("Detected %s content%s", detected, f" for {name}" if name else "")
    return detected


def _sniff(raw: str) -> ContentFormat:
    head = raw[:4096]
    if _XML_START.match(head):
        # XHTML documents carry an XML declaration too
        return "html" if _HTML_START.match(head.split("?>", 1)[-1]) else "xml"
    if _HTML_START.match(head):
        return "html"
    if _TAG_START.match(head):
        return "xml"
    if _MANIFEST_START.match(head):
        return "manifest"
    return "plain"

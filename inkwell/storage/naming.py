"""Reversible mapping between user-supplied names and path segments.

Blog names and post titles are arbitrary UTF-8 text. On disk each one
becomes a single directory name: the URL-safe base64 encoding of its UTF-8
bytes with the padding stripped. The alphabet is ``A-Z a-z 0-9 - _``, so an
encoded name never contains a path separator, never equals ``.`` or ``..``
and never contains a null byte, whatever the input was.

Examples:
    >>> from inkwell.storage.naming import encode_name, decode_name
    >>> encode_name("My Blog")
    'TXkgQmxvZw'
    >>> decode_name("TXkgQmxvZw")
    'My Blog'
"""

from __future__ import annotations

import base64
import binascii
import re

_SEGMENT_RE = re.compile(r"[A-Za-z0-9_-]*")


class NameDecodeError(ValueError):
    """A path segment could not be turned back into a name."""


class InvalidEncoding(NameDecodeError):
    """Segment is not something encode_name() could have produced."""


class InvalidUtf8(NameDecodeError):
    """Segment decodes to bytes that are not valid UTF-8."""


def encode_name(name: str) -> str:
    """Encode a name into a filesystem-safe path segment.

    Args:
        name: Any string that can be represented as UTF-8.

    Returns:
        Unpadded URL-safe base64 of the name's UTF-8 bytes.

    Raises:
        InvalidUtf8: If the string holds lone surrogates.
    """
    try:
        raw = name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidUtf8(f"Name is not representable as UTF-8: {name!r}") from exc
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_name(segment: str) -> str:
    """Decode a path segment produced by encode_name().

    Only canonical encodings are accepted, so decoding is the exact inverse
    of encoding: two different segments never decode to the same name.

    Args:
        segment: Directory name read back from storage.

    Returns:
        The original name.

    Raises:
        InvalidEncoding: Wrong alphabet, padding, impossible length or
            non-canonical trailing bits.
        InvalidUtf8: The decoded bytes are not UTF-8.
    """
    if not _SEGMENT_RE.fullmatch(segment):
        raise InvalidEncoding(f"Segment has characters outside the alphabet: {segment!r}")
    if len(segment) % 4 == 1:
        raise InvalidEncoding(f"Segment has an impossible length: {segment!r}")

    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding(f"Segment is not valid base64: {segment!r}") from exc

    # Non-zero trailing bits decode fine but do not round-trip
    if base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii") != segment:
        raise InvalidEncoding(f"Segment is not a canonical encoding: {segment!r}")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidUtf8(f"Segment does not decode to UTF-8: {segment!r}") from exc

"""Revision number decoding.

The version property of pages and attachments is decoded from its raw bytes.
A missing or garbled version never aborts a run: every decoder here returns 0
instead of raising.
"""

import logging

logger = logging.getLogger(__name__)

# A 64-bit value needs at most ten 7-bit groups.
MAX_VARINT_LEN = 10

REVISION_ENCODINGS = ("varint", "decimal")


def decode_uvarint(raw: bytes) -> int:
    """Decode an unsigned LEB128 varint from the start of raw.

    Each byte contributes its low 7 bits, least significant group first; a set
    high bit means another byte follows. Bytes after the terminating byte are
    ignored.

    Args:
        raw: Byte buffer to decode

    Returns:
        The decoded value, or 0 if the buffer is empty, ends mid-value, or
        encodes more than 64 bits

    Examples:
        >>> decode_uvarint(b"\\x05")
        5
        >>> decode_uvarint(b"\\xac\\x02")
        300
        >>> decode_uvarint(b"")
        0
    """
    value = 0
    shift = 0
    for index, byte in enumerate(raw):
        if index == MAX_VARINT_LEN:
            return 0
        if byte < 0x80:
            if index == MAX_VARINT_LEN - 1 and byte > 1:
                return 0
            return value | (byte << shift)
        value |= (byte & 0x7F) << shift
        shift += 7
    return 0


def decode_decimal(raw: bytes) -> int:
    """Decode ASCII decimal text such as b"12", or 0 if it is not one."""
    text = raw.strip()
    if not text or not text.isdigit():
        return 0
    return int(text)


def decode_revision(raw: bytes, encoding: str = "varint") -> int:
    """Decode a revision property using the configured encoding.

    Args:
        raw: Raw bytes of the version property
        encoding: "varint" or "decimal"

    Returns:
        Revision number, 0 when the value cannot be decoded

    Raises:
        ValueError: If encoding is not a known revision encoding
    """
    if encoding == "varint":
        revision = decode_uvarint(raw)
    elif encoding == "decimal":
        revision = decode_decimal(raw)
    else:
        raise ValueError(
            f"Unknown revision encoding '{encoding}'. Must be one of: {', '.join(REVISION_ENCODINGS)}"
        )

    if revision == 0 and raw:
        logger.debug(f"Revision value {raw!r} decoded to 0 as {encoding}")
    return revision

"""
Byte transcoding through Python's codec registry.

Not meant to be called directly. Encoding names are canonicalized through
encoding_names before the codec is looked up.
"""

from encoding_constants import BYTE_ORDER_MARKS
from encoding_names import UnknownEncodingError, python_codec

REPLACEMENT_CHAR = '\ufffd'
BOM_CHAR = '\ufeff'


class CodecError(ValueError):
    """Raised when bytes cannot be decoded or text cannot be encoded."""


def strip_byte_order_mark(data: bytes) -> bytes:
    """Remove a leading UTF-8/16/32 byte-order mark, if any."""
    for bom in BYTE_ORDER_MARKS:
        if data.startswith(bom):
            return data[len(bom):]
    return data


def decode(data: bytes, encoding: str, errors: str = 'strict', strip_bom: bool = False) -> str:
    """Decode bytes with the given encoding.

    A leading U+FEFF in the decoded text is always dropped; with strip_bom
    the raw byte-order mark is removed before decoding as well.
    """
    try:
        codec = python_codec(encoding)
    except UnknownEncodingError as e:
        raise CodecError(str(e)) from e

    if strip_bom:
        data = strip_byte_order_mark(data)

    try:
        text = data.decode(codec, errors=errors)
    except (UnicodeDecodeError, LookupError) as e:
        raise CodecError(f"Cannot decode as {encoding}: {e}") from e

    if text.startswith(BOM_CHAR):
        text = text[1:]
    return text


def encode(text: str, encoding: str, errors: str = 'strict') -> bytes:
    """Encode text with the given encoding."""
    try:
        codec = python_codec(encoding)
    except UnknownEncodingError as e:
        raise CodecError(str(e)) from e

    try:
        return text.encode(codec, errors=errors)
    except (UnicodeEncodeError, LookupError) as e:
        raise CodecError(f"Cannot encode as {encoding}: {e}") from e


def count_replacements(data: bytes, encoding: str) -> int:
    """Number of U+FFFD substitutions produced by a lenient decode."""
    text = decode(data, encoding, errors='replace')
    return text.count(REPLACEMENT_CHAR)


def round_trips(data: bytes, encoding: str) -> bool:
    """True when decode-then-encode in one encoding reproduces data exactly."""
    try:
        return encode(decode(data, encoding), encoding) == data
    except CodecError:
        return False

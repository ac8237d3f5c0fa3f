# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Compress and encode file contents as embeddable source literals.

Compression is raw DEFLATE (no zlib header or trailer). The compressed or
plain bytes are then rendered in one of two textual forms:

``Encoding.BASE64``
    Standard base64 alphabet, padded, no line wrapping. About 33% larger
    than the input and decoded with :func:`base64.b64decode`.

``Encoding.ESCAPED``
    One ``\\xNN`` escape per byte with no separators. Four times the input
    size but the generated module only needs a ``bytes`` literal.

:func:`decode` is the exact inverse of :func:`encode` and mirrors what the
generated functions do at runtime.
"""

from __future__ import annotations

import base64
import binascii
import re
import zlib
from enum import StrEnum
from pathlib import Path

from .errors import CompressionError, PayloadDecodeError

__all__ = [
    "BEST_COMPRESSION",
    "BEST_SPEED",
    "DEFAULT_COMPRESSION",
    "HUFFMAN_ONLY",
    "NO_COMPRESSION",
    "Encoding",
    "compress",
    "decode",
    "decompress",
    "encode",
    "read_payload",
    "validate_level",
]

HUFFMAN_ONLY = -2
DEFAULT_COMPRESSION = -1
NO_COMPRESSION = 0
BEST_SPEED = 1
BEST_COMPRESSION = 9

# Raw DEFLATE streams, matching what the generated modules decompress.
WBITS = -zlib.MAX_WBITS

_ESCAPED_RE = re.compile(r"(?:\\x[0-9a-fA-F]{2})*")


class Encoding(StrEnum):
    """Textual form used for embedded payloads."""

    BASE64 = "base64"
    ESCAPED = "escaped"


def validate_level(level: int) -> int:
    """Return ``level`` if it is a DEFLATE level this tool accepts."""

    if isinstance(level, bool) or not isinstance(level, int):
        raise CompressionError(f"Compression level must be an integer: {level!r}")
    if not HUFFMAN_ONLY <= level <= BEST_COMPRESSION:
        raise CompressionError(
            f"Invalid compression level {level}: "
            f"expected {HUFFMAN_ONLY}..{BEST_COMPRESSION}"
        )
    return level


def compress(data: bytes, level: int = DEFAULT_COMPRESSION) -> bytes:
    """Compress ``data`` into a raw DEFLATE stream."""

    return _deflate(data, level)


def _deflate(data: bytes, level: int) -> bytes:
    _ = validate_level(level)
    try:
        if level == HUFFMAN_ONLY:
            compressor = zlib.compressobj(
                zlib.Z_DEFAULT_COMPRESSION,
                zlib.DEFLATED,
                WBITS,
                strategy=zlib.Z_HUFFMAN_ONLY,
            )
        else:
            compressor = zlib.compressobj(level, zlib.DEFLATED, WBITS)
        return compressor.compress(data) + compressor.flush()
    except zlib.error as error:
        raise CompressionError(f"Compression failed: {error}") from error


def decompress(data: bytes) -> bytes:
    """Inflate a raw DEFLATE stream produced by :func:`compress`."""

    try:
        return zlib.decompress(data, WBITS)
    except zlib.error as error:
        raise PayloadDecodeError(f"Decompression failed: {error}") from error


def encode(
    data: bytes,
    *,
    compress: bool = True,
    level: int = DEFAULT_COMPRESSION,
    encoding: Encoding = Encoding.BASE64,
) -> str:
    """Return the textual literal embedded for ``data``."""

    payload = _deflate(data, level) if compress else data
    if encoding is Encoding.ESCAPED:
        return "".join(f"\\x{byte:02x}" for byte in payload)
    return base64.b64encode(payload).decode("ascii")


def decode(
    literal: str,
    *,
    compressed: bool = True,
    encoding: Encoding = Encoding.BASE64,
) -> bytes:
    """Turn a literal produced by :func:`encode` back into the original bytes."""

    if encoding is Encoding.ESCAPED:
        if _ESCAPED_RE.fullmatch(literal) is None:
            raise PayloadDecodeError("Malformed escaped-byte literal.")
        payload = bytes.fromhex(literal.replace("\\x", ""))
    else:
        try:
            payload = base64.b64decode(literal, validate=True)
        except binascii.Error as error:
            raise PayloadDecodeError(f"Malformed base64 literal: {error}") from error
    return decompress(payload) if compressed else payload


def read_payload(
    path: str | Path,
    *,
    compress: bool = True,
    level: int = DEFAULT_COMPRESSION,
    encoding: Encoding = Encoding.BASE64,
) -> str:
    """Read ``path`` and return its encoded literal.

    I/O failures propagate as :class:`OSError`.
    """

    data = Path(path).read_bytes()
    return encode(data, compress=compress, level=level, encoding=encoding)


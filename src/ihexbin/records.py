# Copyright (c) 2026, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""Intel HEX records.

Each line of an Intel HEX file holds one *record*::

    :CCAAAATTDD...DDSS

where ``CC`` is the data byte count, ``AAAA`` the 16-bit address, ``TT`` the
record type, ``DD`` the data bytes and ``SS`` the two's complement checksum,
all written as hexadecimal digit pairs.

Decoded records carry their *contents*: the whole decoded line, byte-stuffed
and bracketed by start/end markers, ready to be streamed to a device
expecting framed packets.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import binascii
import enum
import re
from typing import Sequence
from typing import Type
from typing import Union

from .errors import ChecksumError
from .errors import LengthError
from .errors import MalformedRecordError
from .errors import UnsupportedTypeError

AnyBytes = Union[bytes, bytearray, memoryview]
AnyLine = Union[str, bytes, bytearray, memoryview]

FRAME_START: int = 0x01
r"""Start of frame marker (SOH)."""

FRAME_END: int = 0x04
r"""End of frame marker (EOT)."""

FRAME_ESCAPE: int = 0x10
r"""Escape prefix (DLE)."""

FRAME_RESERVED: Sequence[int] = (FRAME_START, FRAME_END, FRAME_ESCAPE)
r"""Byte values escaped within a frame."""

RECORD_OVERHEAD: int = 5
r"""Count, address (2), type and checksum bytes."""

HEX_PAIRS_REGEX = re.compile(b'(?:[0-9A-Fa-f]{2})*')


def frame(raw: AnyBytes) -> bytes:
    r"""Frames a byte string.

    Each byte listed by :data:`FRAME_RESERVED` is preceded by
    :data:`FRAME_ESCAPE`; any other byte is copied as is.
    The result is bracketed by :data:`FRAME_START` and :data:`FRAME_END`.

    Args:
        raw (bytes):
            Byte string to frame.

    Returns:
        bytes: Framed byte string.

    Examples:
        >>> frame(b'\x00\x01\x02')
        b'\x01\x00\x10\x01\x02\x04'
        >>> frame(b'')
        b'\x01\x04'
    """

    framed = bytearray([FRAME_START])
    for value in raw:
        if value in FRAME_RESERVED:
            framed.append(FRAME_ESCAPE)
        framed.append(value)
    framed.append(FRAME_END)
    return bytes(framed)


def unframe(framed: AnyBytes) -> bytes:
    r"""Removes framing from a byte string.

    Inverse of :func:`frame`.

    Args:
        framed (bytes):
            Framed byte string, including start and end markers.

    Returns:
        bytes: Original byte string.

    Raises:
        ValueError: Invalid framing.

    Examples:
        >>> unframe(b'\x01\x00\x10\x01\x02\x04')
        b'\x00\x01\x02'
    """

    framed = bytes(framed)
    if len(framed) < 2 or framed[0] != FRAME_START or framed[-1] != FRAME_END:
        raise ValueError('missing frame markers')

    raw = bytearray()
    escaped = False
    for value in framed[1:-1]:
        if escaped:
            if value not in FRAME_RESERVED:
                raise ValueError('invalid escape sequence')
            raw.append(value)
            escaped = False
        elif value == FRAME_ESCAPE:
            escaped = True
        elif value in FRAME_RESERVED:
            raise ValueError('unescaped reserved byte')
        else:
            raw.append(value)

    if escaped:
        raise ValueError('dangling escape')
    return bytes(raw)


class IhexTag(enum.IntEnum):
    r"""Intel HEX record type."""

    DATA = 0
    r"""Binary data."""

    END_OF_FILE = 1
    r"""End of file."""

    EXTENDED_SEGMENT_ADDRESS = 2
    r"""Extended segment address."""

    START_SEGMENT_ADDRESS = 3
    r"""Start segment address."""

    EXTENDED_LINEAR_ADDRESS = 4
    r"""Extended linear address."""

    START_LINEAR_ADDRESS = 5
    r"""Start linear address."""

    def is_data(self) -> bool:

        return self == 0

    def is_eof(self) -> bool:

        return self == 1

    def is_extension(self) -> bool:

        return self == 2 or self == 4

    def is_start(self) -> bool:

        return self == 3 or self == 5


class IhexRecord:
    r"""Intel HEX record.

    Records are built by :meth:`parse` only, after the source line passed all
    the validation steps; there is no such thing as a partially valid record.

    Attributes:
        tag (:class:`IhexTag`):
            Record type.

        contents (bytes):
            Framed record bytes, as delivered to
            :meth:`ihexbin.listeners.DataListener.data`.
            See :func:`frame`.

        raw (bytes):
            Decoded record bytes: count, address, type, data, checksum.

        count (int):
            Declared data byte count.

        address (int):
            16-bit address field.

        data (bytes):
            Data field.

        checksum (int):
            Checksum byte.
    """

    Tag: Type[IhexTag] = IhexTag

    def __init__(self, raw: AnyBytes):

        raw = bytes(raw)
        self.raw: bytes = raw
        self.count: int = raw[0]
        self.address: int = (raw[1] << 8) | raw[2]
        self.tag: IhexTag = self.Tag(raw[3])
        self.data: bytes = raw[4:-1]
        self.checksum: int = raw[-1]
        self.contents: bytes = frame(raw)

    def __eq__(self, other: object) -> bool:

        if not isinstance(other, IhexRecord):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:

        return hash(self.raw)

    def __repr__(self) -> str:

        return (f'<{self.__class__.__name__} tag:={self.tag!r} '
                f'address:=0x{self.address:04X} count:={self.count} '
                f'data:={self.data!r} checksum:=0x{self.checksum:02X}>')

    def __str__(self) -> str:

        return self.to_bytestr(end=b'').decode()

    def compute_checksum(self) -> int:
        r"""Computes the checksum.

        Returns:
            int: Two's complement of the sum of all the bytes before the
            checksum, modulo 256.

        Examples:
            >>> IhexRecord.parse(':0300300002337A1E').compute_checksum()
            30
        """

        return (0x100 - (sum(self.raw[:-1]) & 0xFF)) & 0xFF

    @classmethod
    def parse(cls, line: AnyLine) -> 'IhexRecord':
        r"""Decodes a record line.

        Trailing whitespace (e.g. line terminators) is ignored.
        Checks are performed in order; the first failing one is reported.

        Args:
            line (str or bytes):
                Record line.

        Returns:
            :class:`IhexRecord`: Decoded record.

        Raises:
            :class:`ihexbin.errors.MalformedRecordError`:
                Missing ``:`` marker, or not made of hex digit pairs.

            :class:`ihexbin.errors.ChecksumError`:
                Bytes do not sum to zero modulo 256.

            :class:`ihexbin.errors.LengthError`:
                Byte count not matching the declared data count.

            :class:`ihexbin.errors.UnsupportedTypeError`:
                Unknown record type code.

        Examples:
            >>> record = IhexRecord.parse(':0300300002337A1E\r\n')
            >>> record.tag
            <IhexTag.DATA: 0>
            >>> record.data
            b'\x023z'
        """

        if isinstance(line, str):
            line = line.encode('ascii', errors='replace')
        line = bytes(line).rstrip()

        if not line.startswith(b':'):
            raise MalformedRecordError('missing record marker')

        digits = line[1:]
        if not HEX_PAIRS_REGEX.fullmatch(digits):
            raise MalformedRecordError('syntax error')
        raw = binascii.unhexlify(digits)

        if sum(raw) & 0xFF:
            raise ChecksumError('invalid checksum')

        if not raw or len(raw) != raw[0] + RECORD_OVERHEAD:
            raise LengthError('invalid record length')

        try:
            cls.Tag(raw[3])
        except ValueError:
            raise UnsupportedTypeError(f'unsupported record type {raw[3]}') from None

        return cls(raw)

    def to_bytestr(self, end: AnyBytes = b'\r\n') -> bytes:
        r"""Serializes the record.

        Args:
            end (bytes):
                Line termination.

        Returns:
            bytes: Record line, with upper case hex digits.

        Examples:
            >>> IhexRecord.parse(':00000001ff').to_bytestr()
            b':00000001FF\r\n'
        """

        return b':%s%s' % (binascii.hexlify(self.raw).upper(), bytes(end))


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

r"""Intel HEX decoding errors.

All the errors raised while decoding an Intel HEX stream derive from
:class:`IhexError`, itself a :class:`ValueError`.
Failures of the underlying input or output streams are *not* wrapped, and
propagate as :class:`OSError`, so that callers can tell a broken file apart
from a broken device.
"""

from typing import Optional


class IhexError(ValueError):
    r"""Intel HEX stream error.

    Args:
        message (str):
            Error description.

        index (int):
            1-based index of the offending line, if known.
            The :class:`ihexbin.parser.Parser` fills it in while processing
            the input stream.

    Attributes:
        message (str):
            Error description, without line information.

        index (int):
            1-based index of the offending line, or ``None``.
    """

    def __init__(self, message: str, index: Optional[int] = None):

        super().__init__(message)
        self.message: str = message
        self.index: Optional[int] = index

    def __str__(self) -> str:

        if self.index is None:
            return self.message
        return f'{self.message} (line {self.index})'


class MalformedRecordError(IhexError):
    r"""Missing ``:`` marker, or not a sequence of hex digit pairs."""


class ChecksumError(IhexError):
    r"""Record bytes do not sum to zero modulo 256."""


class LengthError(IhexError):
    r"""Declared data length does not match the record length."""


class UnsupportedTypeError(IhexError):
    r"""Record type code outside of :class:`ihexbin.records.IhexTag`."""


class DataAfterEofError(IhexError):
    r"""Any line found after the end of file record."""


class MissingEofError(IhexError):
    r"""Input exhausted without an end of file record."""

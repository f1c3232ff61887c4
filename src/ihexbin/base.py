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

r"""High-level conversion helpers."""

import io
import logging
import sys
from typing import IO
from typing import Optional
from typing import Union

from .listeners import BinaryWriter
from .listeners import write_output
from .parser import Parser

_logger = logging.getLogger(__name__)


def convert(
    in_path_or_stream: Optional[Union[str, IO]] = None,
    out_path_or_stream: Optional[Union[str, IO]] = None,
) -> bytes:
    r"""Converts an Intel HEX file into a binary file.

    The output is written only after the whole input was parsed
    successfully; an output file is neither created nor truncated otherwise.

    Args:
        in_path_or_stream (str or IO):
            Input file path or stream.
            If ``None``, ``sys.stdin.buffer`` is used.

        out_path_or_stream (str or bytes IO):
            Output file path or byte stream.
            If ``None``, ``sys.stdout.buffer`` is used.

    Returns:
        bytes: The written binary contents.

    Raises:
        :class:`ihexbin.errors.IhexError`: Invalid input.

        OSError: Input or output failure.

    Examples:
        >>> import io
        >>> source = io.BytesIO(b':00000001FF\r\n')
        >>> target = io.BytesIO()
        >>> convert(source, target)
        b'\x01\x00\x00\x00\x10\x01\xff\x04'
    """

    if in_path_or_stream is None:
        in_path_or_stream = sys.stdin.buffer

    staging = io.BytesIO()
    writer = BinaryWriter(staging)

    if isinstance(in_path_or_stream, io.IOBase):
        Parser(in_path_or_stream).set_data_listener(writer).parse()
    else:
        path = str(in_path_or_stream)
        _logger.info('converting %s', path)
        with open(path, 'rb') as stream:
            Parser(stream).set_data_listener(writer).parse()

    data = staging.getvalue()
    write_output(out_path_or_stream, data)
    return data

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

r"""Data listeners.

A *data listener* receives the events emitted by
:class:`ihexbin.parser.Parser`:

* :meth:`DataListener.data` once per decoded record, end of file record
  included, with the framed record contents;
* :meth:`DataListener.eof` exactly once, after the end of file record.

Nothing is delivered after :meth:`DataListener.eof`.
"""

import abc
import io
import logging
import sys
from typing import IO
from typing import Optional
from typing import Union

from .records import AnyBytes

_logger = logging.getLogger(__name__)


def write_output(
    out_path_or_stream: Optional[Union[str, IO]],
    data: AnyBytes,
) -> None:
    r"""Writes a whole byte string to the output.

    Partial writes of raw streams are resumed until all the data is written.

    Args:
        out_path_or_stream (str or bytes IO):
            Path of the output file within the filesystem, or output byte
            stream.
            If ``None``, ``sys.stdout.buffer`` is used.

        data (bytes):
            Data to write.

    Raises:
        OSError: The output does not accept the data.
    """

    if out_path_or_stream is None:
        out_path_or_stream = sys.stdout.buffer

    if isinstance(out_path_or_stream, io.IOBase):
        stream = out_path_or_stream
        _write_all(stream, data)
        stream.flush()
    else:
        path = str(out_path_or_stream)
        with open(path, 'wb') as stream:
            _write_all(stream, data)


def _write_all(stream: IO, data: AnyBytes) -> None:

    view = memoryview(data)
    while view:
        written = stream.write(view)
        if not written:
            raise OSError('output stream not writable')
        view = view[written:]


class DataListener(abc.ABC):
    r"""Parser event listener."""

    @abc.abstractmethod
    def data(self, contents: AnyBytes) -> None:
        r"""Receives the contents of a decoded record.

        Args:
            contents (bytes):
                Framed record contents.
        """
        ...

    @abc.abstractmethod
    def eof(self) -> None:
        r"""Receives the end of file notification."""
        ...


class BinaryWriter(DataListener):
    r"""Binary file writer.

    Record contents are buffered in arrival order, and written all at once
    upon :meth:`eof`.
    If the parser aborts before the end of file record, nothing is written,
    and a path-based output is not even opened.
    Lines following the end of file record are rejected only after the
    flush; :func:`ihexbin.base.convert` writes into a staging buffer first,
    so that its output is left untouched in that case too.

    Args:
        out_path_or_stream (str or bytes IO):
            Path of the output file within the filesystem, or output byte
            stream.
            If ``None``, ``sys.stdout.buffer`` is used.

    Examples:
        >>> import io
        >>> stream = io.BytesIO()
        >>> writer = BinaryWriter(stream)
        >>> writer.data(b'\x01\x00\x00\x00\x10\x01\xff\x04')
        >>> writer.eof()
        >>> stream.getvalue()
        b'\x01\x00\x00\x00\x10\x01\xff\x04'
    """

    def __init__(self, out_path_or_stream: Optional[Union[str, IO]] = None):

        self._buffer: bytearray = bytearray()
        self._destination: Optional[Union[str, IO]] = out_path_or_stream
        self._flushed: bool = False

    @property
    def buffer(self) -> bytes:
        r"""bytes: Contents accumulated so far."""

        return bytes(self._buffer)

    def data(self, contents: AnyBytes) -> None:

        if self._flushed:
            raise ValueError('data after flush')

        self._buffer.extend(contents)

    def eof(self) -> None:

        if self._flushed:
            raise ValueError('already flushed')

        write_output(self._destination, bytes(self._buffer))
        self._flushed = True
        _logger.debug('written %d bytes', len(self._buffer))

    @property
    def flushed(self) -> bool:
        r"""bool: Contents written to the output."""

        return self._flushed

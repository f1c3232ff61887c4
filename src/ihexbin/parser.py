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

r"""Intel HEX stream parser."""

import logging
from typing import Iterable
from typing import Optional

from .errors import DataAfterEofError
from .errors import IhexError
from .errors import MalformedRecordError
from .errors import MissingEofError
from .listeners import DataListener
from .records import AnyLine
from .records import IhexRecord

_logger = logging.getLogger(__name__)


class ParserState:
    r"""State of a single parsing run.

    A new instance is created by each call to :meth:`Parser.parse`.

    Attributes:
        eof (bool):
            The end of file record was processed.

        index (int):
            1-based index of the line being processed.
            After a successful run, it is one past the last line.
    """

    def __init__(self):

        self.eof: bool = False
        self.index: int = 1

    def __repr__(self) -> str:

        return f'<{self.__class__.__name__} eof:={self.eof!r} index:={self.index!r}>'


class Parser:
    r"""Intel HEX parser.

    Reads the input line by line, decodes each line into an
    :class:`ihexbin.records.IhexRecord`, and forwards it to the attached
    :class:`ihexbin.listeners.DataListener`.

    The stream must end with exactly one end of file record.
    Any error aborts parsing at once: the listener may have received some
    record contents, but never :meth:`ihexbin.listeners.DataListener.eof`.

    Trailing blank lines are ignored.

    Args:
        stream (iterable of str or bytes):
            Source of lines, e.g. a text or binary file object.

    Examples:
        >>> import io
        >>> from ihexbin.listeners import BinaryWriter
        >>> output = io.BytesIO()
        >>> parser = Parser([':0300300002337A1E', ':00000001FF'])
        >>> parser.set_data_listener(BinaryWriter(output))
        >>> parser.parse()
        <ParserState eof:=True index:=3>
        >>> output.getvalue()
        b'\x01\x03\x000\x00\x023z\x1e\x04\x01\x00\x00\x00\x10\x01\xff\x04'
    """

    Record = IhexRecord

    def __init__(self, stream: Iterable[AnyLine]):

        self._stream: Iterable[AnyLine] = stream
        self._listener: Optional[DataListener] = None
        self._state: Optional[ParserState] = None

    @property
    def data_listener(self) -> Optional[DataListener]:
        r""":class:`ihexbin.listeners.DataListener`: Attached listener."""

        return self._listener

    @data_listener.setter
    def data_listener(self, listener: Optional[DataListener]) -> None:

        self._listener = listener

    def set_data_listener(self, listener: DataListener) -> 'Parser':
        r"""Attaches the data listener.

        Args:
            listener (:class:`ihexbin.listeners.DataListener`):
                Listener receiving the parsing events.

        Returns:
            :class:`Parser`: *self*.
        """

        self._listener = listener
        return self

    @property
    def state(self) -> Optional[ParserState]:
        r""":class:`ParserState`: State of the latest run, if any."""

        return self._state

    def _process_line(self, state: ParserState, line: AnyLine) -> None:

        if state.eof:
            raise DataAfterEofError('data after end of file', state.index)

        try:
            record = self.Record.parse(line)
        except IhexError as exc:
            exc.index = state.index
            raise

        _logger.debug('line %d: %r', state.index, record)
        self._listener.data(record.contents)

        if record.tag.is_eof():
            self._listener.eof()
            state.eof = True

    def parse(self) -> ParserState:
        r"""Parses the whole input stream.

        Returns:
            :class:`ParserState`: State of the completed run.

        Raises:
            ValueError: Missing data listener.

            :class:`ihexbin.errors.IhexError`: Invalid input.
        """

        listener = self._listener
        if listener is None:
            raise ValueError('data listener required')

        state = ParserState()
        self._state = state
        blank_index = None

        for line in self._stream:
            if not isinstance(line, str):
                line = bytes(line)

            if not line.strip():
                if blank_index is None:
                    blank_index = state.index
                state.index += 1
                continue

            if blank_index is not None:
                if state.eof:
                    raise DataAfterEofError('data after end of file', blank_index)
                raise MalformedRecordError('empty line', blank_index)

            self._process_line(state, line)
            state.index += 1

        if not state.eof:
            raise MissingEofError('missing end of file record')

        _logger.info('parsed %d lines', state.index - 1)
        return state

import io

import pytest

from ihexbin.errors import ChecksumError
from ihexbin.errors import DataAfterEofError
from ihexbin.errors import LengthError
from ihexbin.errors import MalformedRecordError
from ihexbin.errors import MissingEofError
from ihexbin.errors import UnsupportedTypeError
from ihexbin.listeners import BinaryWriter
from ihexbin.listeners import DataListener
from ihexbin.parser import Parser
from ihexbin.parser import ParserState
from ihexbin.records import IhexRecord

EOF_LINE = ':00000001FF'
EOF_CONTENTS = b'\x01\x00\x00\x00\x10\x01\xFF\x04'
DATA_LINE = ':0300300002337A1E'
DATA_CONTENTS = b'\x01\x03\x00\x30\x00\x02\x33\x7A\x1E\x04'


class RecordingListener(DataListener):

    def __init__(self):
        self.events = []

    def data(self, contents):
        assert not any(event == ('eof',) for event in self.events)
        self.events.append(('data', bytes(contents)))

    def eof(self):
        assert not any(event == ('eof',) for event in self.events)
        self.events.append(('eof',))

    @property
    def eof_count(self):
        return self.events.count(('eof',))


class CountingIterable:

    def __init__(self, lines):
        self.lines = list(lines)
        self.consumed = 0

    def __iter__(self):
        for line in self.lines:
            self.consumed += 1
            yield line


def parse_lines(lines):
    listener = RecordingListener()
    parser = Parser(lines)
    parser.set_data_listener(listener)
    state = parser.parse()
    return parser, listener, state


class TestParserState:

    def test___init__(self):
        state = ParserState()
        assert state.eof is False
        assert state.index == 1

    def test___repr__(self):
        assert repr(ParserState()) == '<ParserState eof:=False index:=1>'


class TestParser:

    def test___init__(self):
        parser = Parser([])
        assert parser.data_listener is None
        assert parser.state is None
        assert parser.Record is IhexRecord

    def test_set_data_listener(self):
        parser = Parser([])
        listener = RecordingListener()
        assert parser.set_data_listener(listener) is parser
        assert parser.data_listener is listener

    def test_data_listener_setter(self):
        parser = Parser([])
        listener = RecordingListener()
        parser.data_listener = listener
        assert parser.data_listener is listener
        parser.data_listener = None
        assert parser.data_listener is None

    def test_parse_raises_no_listener(self):
        parser = Parser([EOF_LINE])
        with pytest.raises(ValueError, match='data listener required'):
            parser.parse()

    def test_parse_data_record(self):
        _, listener, state = parse_lines([DATA_LINE, EOF_LINE])
        assert listener.events == [
            ('data', DATA_CONTENTS),
            ('data', EOF_CONTENTS),
            ('eof',),
        ]
        assert state.eof is True
        assert state.index == 3

    def test_parse_eof_only(self):
        parser, listener, state = parse_lines([EOF_LINE])
        assert listener.events == [('data', EOF_CONTENTS), ('eof',)]
        assert listener.eof_count == 1
        assert state.eof is True
        assert parser.state is state

    def test_parse_all_tags(self):
        lines = [
            ':020000021200EA',
            ':0400000300003800C1',
            ':020000040800F2',
            ':04000005000000CD2A',
            ':0B0010006164647265737320676170A7',
            EOF_LINE,
        ]
        _, listener, _ = parse_lines(lines)
        assert len(listener.events) == len(lines) + 1
        assert listener.eof_count == 1
        for line, event in zip(lines, listener.events):
            assert event == ('data', IhexRecord.parse(line).contents)

    def test_parse_bytes_lines(self):
        _, listener, _ = parse_lines([b':0300300002337A1E\r\n', b':00000001FF\r\n'])
        assert listener.events == [
            ('data', DATA_CONTENTS),
            ('data', EOF_CONTENTS),
            ('eof',),
        ]

    def test_parse_memoryview_lines(self):
        lines = [
            memoryview(b':0300300002337A1E'),
            memoryview(bytearray(b':00000001FF\r\n')),
            memoryview(b'\r\n'),
        ]
        _, listener, state = parse_lines(lines)
        assert listener.events == [
            ('data', DATA_CONTENTS),
            ('data', EOF_CONTENTS),
            ('eof',),
        ]
        assert state.index == 4

    def test_parse_bytearray_lines(self):
        _, listener, _ = parse_lines([bytearray(b':00000001FF')])
        assert listener.events == [('data', EOF_CONTENTS), ('eof',)]

    def test_parse_binary_stream(self):
        stream = io.BytesIO(b':0300300002337A1E\r\n:00000001FF\r\n')
        _, listener, _ = parse_lines(stream)
        assert listener.eof_count == 1

    def test_parse_text_stream(self):
        stream = io.StringIO(':0300300002337A1E\n:00000001FF\n')
        _, listener, _ = parse_lines(stream)
        assert listener.eof_count == 1

    def test_parse_trailing_blank_lines(self):
        stream = io.StringIO(':00000001FF\n\n  \n\r\n')
        _, listener, state = parse_lines(stream)
        assert listener.events == [('data', EOF_CONTENTS), ('eof',)]
        assert state.index == 5

    def test_parse_raises_blank_line_inside(self):
        listener = RecordingListener()
        parser = Parser(['', DATA_LINE, EOF_LINE]).set_data_listener(listener)
        with pytest.raises(MalformedRecordError, match=r'empty line \(line 1\)'):
            parser.parse()
        assert listener.events == []

        listener = RecordingListener()
        parser = Parser([DATA_LINE, '', '', EOF_LINE]).set_data_listener(listener)
        with pytest.raises(MalformedRecordError) as excinfo:
            parser.parse()
        assert excinfo.value.index == 2
        assert listener.events == [('data', DATA_CONTENTS)]

    def test_parse_raises_blank_line_after_eof(self):
        listener = RecordingListener()
        parser = Parser([EOF_LINE, '', DATA_LINE]).set_data_listener(listener)
        with pytest.raises(DataAfterEofError) as excinfo:
            parser.parse()
        assert excinfo.value.index == 2
        assert listener.eof_count == 1

    def test_parse_raises_data_after_eof(self):
        listener = RecordingListener()
        parser = Parser([EOF_LINE, EOF_LINE]).set_data_listener(listener)
        with pytest.raises(DataAfterEofError, match=r'data after end of file \(line 2\)'):
            parser.parse()
        assert listener.events == [('data', EOF_CONTENTS), ('eof',)]

    def test_parse_raises_data_after_eof_any_line(self):
        for line in [DATA_LINE, ':garbage', 'garbage', ':00000001FE']:
            listener = RecordingListener()
            parser = Parser([EOF_LINE, line]).set_data_listener(listener)
            with pytest.raises(DataAfterEofError):
                parser.parse()
            assert listener.eof_count == 1

    def test_parse_raises_missing_eof(self):
        lines = CountingIterable([DATA_LINE, DATA_LINE, DATA_LINE])
        listener = RecordingListener()
        parser = Parser(lines).set_data_listener(listener)
        with pytest.raises(MissingEofError, match='missing end of file record'):
            parser.parse()
        assert lines.consumed == 3
        assert listener.events == [('data', DATA_CONTENTS)] * 3
        assert parser.state.eof is False

    def test_parse_raises_missing_eof_empty(self):
        for lines in ([], [''], ['', '\n']):
            parser = Parser(lines).set_data_listener(RecordingListener())
            with pytest.raises(MissingEofError):
                parser.parse()

    def test_parse_raises_decode_errors(self):
        vector = [
            (MalformedRecordError, '0300300002337A1E'),
            (ChecksumError, ':0300300002337A1F'),
            (LengthError, ':01000000FF'),
            (UnsupportedTypeError, ':00000006FA'),
        ]
        for error_type, line in vector:
            listener = RecordingListener()
            parser = Parser([DATA_LINE, line, EOF_LINE]).set_data_listener(listener)
            with pytest.raises(error_type) as excinfo:
                parser.parse()
            assert excinfo.value.index == 2
            assert str(excinfo.value).endswith('(line 2)')
            assert listener.events == [('data', DATA_CONTENTS)]

    def test_parse_aborts_immediately(self):
        lines = CountingIterable([DATA_LINE, ':0300300002337A1F', DATA_LINE, EOF_LINE])
        parser = Parser(lines).set_data_listener(RecordingListener())
        with pytest.raises(ChecksumError):
            parser.parse()
        assert lines.consumed == 2

    def test_parse_checksum_writes_nothing(self):
        stream = io.BytesIO()
        writer = BinaryWriter(stream)
        parser = Parser([DATA_LINE, ':0300300002337A1F', EOF_LINE]).set_data_listener(writer)
        with pytest.raises(ChecksumError):
            parser.parse()
        assert stream.getvalue() == b''
        assert writer.flushed is False

    def test_parse_writer(self):
        stream = io.BytesIO()
        parser = Parser([DATA_LINE, EOF_LINE]).set_data_listener(BinaryWriter(stream))
        parser.parse()
        assert stream.getvalue() == DATA_CONTENTS + EOF_CONTENTS

    def test_parse_resets_state(self):
        parser = Parser([DATA_LINE, EOF_LINE])
        listener1 = RecordingListener()
        state1 = parser.set_data_listener(listener1).parse()
        listener2 = RecordingListener()
        state2 = parser.set_data_listener(listener2).parse()
        assert state1 is not state2
        assert state2.eof is True
        assert state2.index == 3
        assert parser.state is state2
        assert listener1.events == listener2.events
        assert listener2.eof_count == 1

    def test_parse_listener_error_propagates(self):

        class FailingListener(RecordingListener):
            def eof(self):
                raise OSError('device full')

        parser = Parser([DATA_LINE, EOF_LINE]).set_data_listener(FailingListener())
        with pytest.raises(OSError, match='device full'):
            parser.parse()
        assert parser.state.eof is False

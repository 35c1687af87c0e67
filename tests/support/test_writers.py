import io

import pytest

from httpmask.errors import DecodingError, IndexOutOfRangeError, NullArgumentError
from httpmask.http.parameters import RequestParameterObfuscator
from httpmask.obfuscator import all as mask_all
from httpmask.support.writers import CachingObfuscatingWriter, LimitAppendable

INPUT = "foo=bar&hello=world&no-value"
EXPECTED = "foo=***&hello=world&no-value"


@pytest.fixture
def obfuscator():
    return RequestParameterObfuscator.builder().with_parameter("foo", mask_all()).build()


class RecordingDestination(io.StringIO):
    """StringIO that records flush and close calls but keeps its content."""

    def __init__(self):
        super().__init__()
        self.flushes = 0
        self.close_calls = 0

    def flush(self):
        self.flushes += 1

    def close(self):
        self.close_calls += 1


# ---------------------------------------------------------------------------
# LimitAppendable
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_limit_appendable_truncates_and_drops_later_writes():
    destination = io.StringIO()
    appendable = LimitAppendable(destination, 5)

    appendable.write("abc")
    assert appendable.limit_exceeded is False
    appendable.write("defg")
    assert appendable.limit_exceeded is True
    appendable.write("hij")

    assert destination.getvalue() == "abcde"


@pytest.mark.unit
def test_limit_appendable_exact_limit_is_not_exceeded():
    destination = io.StringIO()
    appendable = LimitAppendable(destination, 3)
    appendable.write("abc")
    appendable.write("")
    assert appendable.limit_exceeded is False
    assert destination.getvalue() == "abc"


@pytest.mark.unit
def test_limit_appendable_without_limit():
    destination = io.StringIO()
    appendable = LimitAppendable(destination, None)
    appendable.write("x" * 10000)
    assert appendable.limit_exceeded is False
    assert len(destination.getvalue()) == 10000


# ---------------------------------------------------------------------------
# CachingObfuscatingWriter
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_write_char(obfuscator):
    destination = io.StringIO()
    with obfuscator.stream_to(destination) as writer:
        for i, c in enumerate(INPUT):
            writer.write_char(c if i % 2 else ord(c))
    assert destination.getvalue() == EXPECTED


@pytest.mark.unit
def test_write_char_rejects_strings(obfuscator):
    with obfuscator.stream_to(io.StringIO()) as writer:
        with pytest.raises(ValueError):
            writer.write_char("ab")
        with pytest.raises(NullArgumentError):
            writer.write_char(None)


@pytest.mark.unit
def test_write_chars(obfuscator):
    destination = io.StringIO()
    content = list(INPUT)
    with obfuscator.stream_to(destination) as writer:
        writer.write_chars(content, 0, 5)
        writer.write_chars(content, 5, 10)
        writer.write_chars(content, 15)

        with pytest.raises(IndexOutOfRangeError):
            writer.write_chars(content, 0, len(content) + 1)
        with pytest.raises(IndexOutOfRangeError):
            writer.write_chars(content, -1, len(content))
        with pytest.raises(IndexOutOfRangeError):
            writer.write_chars(content, 1, len(content))
        with pytest.raises(IndexOutOfRangeError):
            writer.write_chars(content, 0, -1)
    assert destination.getvalue() == EXPECTED


@pytest.mark.unit
def test_write_string(obfuscator):
    destination = io.StringIO()
    with obfuscator.stream_to(destination) as writer:
        assert writer.write(INPUT) == len(INPUT)
    assert destination.getvalue() == EXPECTED


@pytest.mark.unit
def test_append_ranges(obfuscator):
    destination = io.StringIO()
    with obfuscator.stream_to(destination) as writer:
        writer.append(INPUT, 0, 5).append(INPUT, 5, 15).append(INPUT, 15)

        length = len(INPUT)
        with pytest.raises(IndexOutOfRangeError):
            writer.append(INPUT, 0, length + 1)
        with pytest.raises(IndexOutOfRangeError):
            writer.append(INPUT, -1, length)
        with pytest.raises(IndexOutOfRangeError):
            writer.append(INPUT, 2, 1)
    assert destination.getvalue() == EXPECTED


@pytest.mark.unit
def test_writelines(obfuscator):
    destination = io.StringIO()
    with obfuscator.stream_to(destination) as writer:
        writer.writelines(["foo=", "bar&", "hello=world", "&no-value"])
    assert destination.getvalue() == EXPECTED


@pytest.mark.unit
def test_flush_does_not_emit(obfuscator):
    destination = io.StringIO()
    with obfuscator.stream_to(destination) as writer:
        writer.write("foo=bar")
        writer.flush()
        assert destination.getvalue() == ""
    assert destination.getvalue() == "foo=***"


@pytest.mark.unit
def test_close_is_idempotent_and_blocks_writes(obfuscator):
    destination = RecordingDestination()
    writer = obfuscator.stream_to(destination)
    writer.write(INPUT)

    writer.close()
    assert writer.closed is True
    writer.close()

    assert destination.getvalue() == EXPECTED
    assert destination.flushes == 1
    assert destination.close_calls == 0

    with pytest.raises(ValueError):
        writer.write("x")
    with pytest.raises(ValueError):
        writer.write_char("x")
    with pytest.raises(ValueError):
        writer.flush()


@pytest.mark.unit
def test_close_destination(obfuscator):
    destination = RecordingDestination()
    with obfuscator.stream_to(destination, close_destination=True) as writer:
        writer.write("foo=bar")
    assert destination.close_calls == 1
    assert destination.getvalue() == "foo=***"


@pytest.mark.unit
def test_destination_without_flush(obfuscator):
    class ListDestination:
        def __init__(self):
            self.parts = []

        def write(self, text):
            self.parts.append(text)

    destination = ListDestination()
    with CachingObfuscatingWriter(obfuscator, destination) as writer:
        writer.write(INPUT)
    assert "".join(destination.parts) == EXPECTED


@pytest.mark.unit
def test_none_arguments(obfuscator):
    with pytest.raises(NullArgumentError):
        obfuscator.stream_to(None)
    with pytest.raises(NullArgumentError):
        CachingObfuscatingWriter(None, io.StringIO())
    with obfuscator.stream_to(io.StringIO()) as writer:
        with pytest.raises(NullArgumentError):
            writer.write(None)


@pytest.mark.unit
def test_close_releases_destination_when_obfuscation_fails(obfuscator):
    destination = RecordingDestination()
    writer = obfuscator.stream_to(destination, close_destination=True)
    writer.write("foo=%zz")

    with pytest.raises(DecodingError):
        writer.close()

    assert writer.closed is True
    assert destination.flushes == 1
    assert destination.close_calls == 1

    # Already closed, so nothing is obfuscated or closed again
    writer.close()
    assert destination.close_calls == 1

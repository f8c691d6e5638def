import pytest

from spongetcp.buffer import Buffer, BufferList, BufferViewList


def test_buffer_basics():
    data = b"hello"
    buf = Buffer(data)
    assert len(buf) == len(data)
    assert bytes(buf) == data
    assert buf.copy() == data
    assert buf[1] == data[1]
    assert buf[-1] == data[-1]
    assert buf[1:3] == data[1:3]
    assert buf == data


def test_buffer_remove_prefix():
    data = b"hello"
    buf = Buffer(data)
    buf.remove_prefix(2)
    assert bytes(buf) == data[2:]
    assert buf[0] == data[2]
    buf.remove_prefix(len(data) - 2)
    assert len(buf) == 0
    assert bytes(buf) == b""


def test_buffer_remove_prefix_too_far():
    buf = Buffer(b"abc")
    with pytest.raises(IndexError):
        buf.remove_prefix(4)
    assert bytes(buf) == b"abc"


def test_buffer_index_out_of_range():
    buf = Buffer(b"ab")
    with pytest.raises(IndexError):
        buf[2]
    with pytest.raises(IndexError):
        Buffer()[0]


def test_buffer_copies_keep_own_offset():
    data = b"abcdef"
    original = Buffer(data)
    clone = Buffer(original)
    original.remove_prefix(3)
    assert bytes(clone) == data
    assert bytes(original) == data[3:]


def test_buffer_equality():
    assert Buffer(b"xy") == Buffer(b"xy")
    assert not (Buffer(b"xy") == Buffer(b"xz"))
    shifted = Buffer(b"_xy")
    shifted.remove_prefix(1)
    assert shifted == Buffer(b"xy")


def test_bufferlist_concatenate_and_len():
    parts = [b"ab", b"", b"cde"]
    blist = BufferList()
    for part in parts:
        blist.append(part)
    assert blist.concatenate() == b"".join(parts)
    assert len(blist) == sum(map(len, parts))
    assert [bytes(b) for b in blist.buffers()] == parts


def test_bufferlist_remove_prefix_across_buffers():
    blist = BufferList(b"abc")
    blist.append(b"defg")
    blist.remove_prefix(4)
    assert blist.concatenate() == b"abcdefg"[4:]
    assert len(blist.buffers()) == 1


def test_bufferlist_remove_prefix_too_far():
    blist = BufferList(b"ab")
    with pytest.raises(IndexError):
        blist.remove_prefix(3)


def test_bufferlist_to_buffer():
    assert BufferList().to_buffer() == b""
    assert BufferList(b"one").to_buffer() == b"one"
    two = BufferList(b"a")
    two.append(b"b")
    with pytest.raises(ValueError):
        two.to_buffer()


def test_bufferlist_append_list_is_independent():
    first = BufferList(b"abc")
    second = BufferList(b"xyz")
    second.append(first)
    first.remove_prefix(2)
    assert second.concatenate() == b"xyzabc"
    assert first.concatenate() == b"c"


def test_bufferlist_buffers_are_copies():
    blist = BufferList(b"abc")
    blist.buffers()[0].remove_prefix(1)
    assert blist.concatenate() == b"abc"


def test_bufferviewlist_from_bufferlist():
    blist = BufferList(b"abc")
    blist.append(Buffer(b"de"))
    views = BufferViewList(blist)
    assert len(views) == len(blist)
    assert b"".join(bytes(v) for v in views.views()) == blist.concatenate()


def test_bufferviewlist_remove_prefix():
    blist = BufferList(b"abc")
    blist.append(b"de")
    views = BufferViewList(blist)
    views.remove_prefix(4)
    assert [bytes(v) for v in views.views()] == [b"e"]
    with pytest.raises(IndexError):
        views.remove_prefix(2)


def test_bufferviewlist_from_bytes_and_str():
    assert [bytes(v) for v in BufferViewList(b"raw").views()] == [b"raw"]
    assert len(BufferViewList("text")) == len("text")
    shifted = Buffer(b"__tail")
    shifted.remove_prefix(2)
    assert [bytes(v) for v in BufferViewList(shifted).views()] == [b"tail"]
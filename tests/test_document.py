from ette.editor.document import Document, SearchMatch
from ette.editor.syntax import C_PROFILE, Highlight


def _doc(text="first row\nsecond row\nthird row\n", syntax=None):
    return Document.from_flat_text(text, syntax=syntax)


def _indices_are_contiguous(doc):
    return [row.index for row in doc] == list(range(len(doc)))


def test_load_flat_text():
    doc = _doc()
    assert doc.numrows == 3
    assert doc.lines() == ["first row", "second row", "third row"]
    assert _indices_are_contiguous(doc)
    assert doc.dirty == 0


def test_load_handles_line_endings():
    assert _doc("a\r\nb\r\n").lines() == ["a", "b"]
    assert _doc("a\nb").lines() == ["a", "b"]
    assert _doc("\n").lines() == [""]
    assert _doc("a\n\n").lines() == ["a", ""]
    assert _doc("").lines() == []


def test_load_bytes_keeps_undecodable_input():
    raw = b"caf\xc3\xa9\n\xff\xfe\n"
    doc = Document.from_flat_text(raw)
    assert doc[0].chars == "café"
    assert doc.to_bytes() == raw


def test_flat_text_round_trip():
    text = "first row\n\tindented\n\nlast\n"
    assert _doc(text).to_flat_text() == text


def test_insert_and_delete_row():
    doc = _doc()
    row = doc.insert_row(1, "new")

    assert row is doc[1]
    assert doc.lines() == ["first row", "new", "second row", "third row"]
    assert _indices_are_contiguous(doc)
    assert doc.dirty == 1

    doc.delete_row(1)
    assert doc.lines() == ["first row", "second row", "third row"]
    assert _indices_are_contiguous(doc)
    assert doc.dirty == 2


def test_out_of_range_rows_are_ignored():
    doc = _doc()
    assert doc.insert_row(5, "x") is None
    assert doc.insert_row(-1, "x") is None
    doc.delete_row(3)
    doc.delete_row(-1)

    assert doc.lines() == ["first row", "second row", "third row"]
    assert doc.dirty == 0


def test_insert_row_at_end():
    doc = _doc()
    doc.insert_row(3, "fourth row")
    assert doc[3].chars == "fourth row"
    assert doc[3].index == 3


def test_insert_char():
    doc = _doc("ab\n")
    doc.insert_char(0, 1, "Z")
    assert doc[0].chars == "aZb"

    doc.insert_char(0, 6, "x")
    assert doc[0].chars == "aZb   x"
    assert doc.dirty == 2


def test_insert_char_adds_missing_rows():
    doc = Document()
    doc.insert_char(0, 0, "a")
    assert doc.lines() == ["a"]
    assert doc.to_flat_text() == "a\n"

    doc.insert_char(2, 0, "c")
    assert doc.lines() == ["a", "", "c"]
    assert _indices_are_contiguous(doc)


def test_insert_string_returns_next_column():
    doc = Document()
    assert doc.insert_string(0, 0, "hello") == 5
    assert doc[0].chars == "hello"


def test_delete_char():
    doc = _doc("abc\n")
    doc.delete_char(0, 0)
    assert doc[0].chars == "bc"

    doc.delete_char(0, 2)
    doc.delete_char(4, 0)
    assert doc[0].chars == "bc"
    assert doc.dirty == 1


def test_append_string():
    doc = _doc("abc\n")
    doc.append_string(0, "def")
    assert doc[0].chars == "abcdef"
    assert doc[0].render == "abcdef"


def test_split_row():
    doc = _doc("hello\n")
    assert doc.split_row(0, 2) == 1
    assert doc.lines() == ["he", "llo"]

    doc = _doc("hello\n")
    assert doc.split_row(0, 0) == 1
    assert doc.lines() == ["", "hello"]

    doc = _doc("hello\n")
    assert doc.split_row(0, 99) == 1
    assert doc.lines() == ["hello", ""]

    assert doc.split_row(7, 0) is None


def test_split_row_past_last_row_appends():
    doc = _doc("hello\n")
    assert doc.split_row(1, 0) == 2
    assert doc.lines() == ["hello", ""]


def test_join_with_previous():
    doc = _doc("first row\nsecond row\n")
    assert doc.join_with_previous(1) == len("first row")
    assert doc.lines() == ["first rowsecond row"]
    assert _indices_are_contiguous(doc)

    assert doc.join_with_previous(0) is None
    assert doc.join_with_previous(3) is None


def test_render_matches_rows():
    doc = _doc("\tint x;\nplain\n", syntax=C_PROFILE)
    rendered = doc.render()

    assert [text for text, _ in rendered] == [" " * 7 + "int x;", "plain"]
    for text, hl in rendered:
        assert len(text) == len(hl)

    rendered[0][1][0] = Highlight.MATCH
    assert doc[0].hl[0] == Highlight.NORMAL


def test_find_wraps_around():
    doc = _doc("alpha\nbeta\nalphabet\n")

    assert doc.find("alpha") == SearchMatch(0, 0)
    assert doc.find("alpha", last_match=0) == SearchMatch(2, 0)
    assert doc.find("alpha", last_match=2) == SearchMatch(0, 0)
    assert doc.find("bet") == SearchMatch(1, 0)
    assert doc.find("bet", last_match=1) == SearchMatch(2, 5)


def test_find_backwards():
    doc = _doc("alpha\nbeta\nalphabet\n")
    assert doc.find("alpha", last_match=2, direction=-1) == SearchMatch(0, 0)
    assert doc.find("alpha", last_match=0, direction=-1) == SearchMatch(2, 0)
    # Without a previous match the search always starts forward.
    assert doc.find("alpha", direction=-1) == SearchMatch(0, 0)


def test_find_nothing():
    doc = _doc("alpha\n")
    assert doc.find("zzz") is None
    assert doc.find("") is None
    assert Document().find("alpha") is None


def test_find_uses_rendered_offsets():
    doc = _doc("\tneedle\n")
    assert doc.find("needle") == SearchMatch(0, 7)


def test_highlight_match_and_restore():
    doc = _doc("int needle;\n", syntax=C_PROFILE)
    before = list(doc[0].hl)
    match = doc.find("needle")

    saved = doc.highlight_match(match, len("needle"))
    assert doc[0].hl[4:10] == [Highlight.MATCH] * 6
    assert saved == before

    doc.restore_highlight(match.row_index, saved)
    assert doc[0].hl == before

import pytest

from agentsesame.editing import (
    CharClass,
    PathInput,
    QueryInput,
    char_class,
    common_prefix,
    find_next_word_end,
    find_prev_word_start,
    is_han,
)


def test_is_han():
    assert is_han("你")
    assert is_han("界")
    assert not is_han("a")
    assert not is_han("あ")


@pytest.mark.parametrize(
    "ch, expected",
    [
        (" ", CharClass.SPACE),
        ("\t", CharClass.SPACE),
        ("你", CharClass.HAN),
        ("あ", CharClass.HIRAGANA),
        ("ア", CharClass.KATAKANA),
        ("한", CharClass.HANGUL),
        ("a", CharClass.ALPHA),
        ("7", CharClass.ALPHA),
        ("_", CharClass.ALPHA),
        (".", CharClass.PUNCT),
        ("/", CharClass.PUNCT),
    ],
)
def test_char_class(ch, expected):
    assert char_class(ch) is expected


def test_prev_word_start_basic():
    text = "hello world"
    assert find_prev_word_start(text, len(text)) == text.index("world")


def test_prev_word_start_skips_trailing_space():
    text = "hello world   "
    assert find_prev_word_start(text, len(text)) == text.index("world")


def test_prev_word_start_stops_at_punctuation():
    text = "foo.bar"
    assert find_prev_word_start(text, len(text)) == text.index("bar")


def test_prev_word_start_blank():
    assert find_prev_word_start("", 0) == 0
    assert find_prev_word_start("   ", 3) == 0


def test_prev_word_start_script_boundary():
    text = "abcあいう"
    assert find_prev_word_start(text, len(text)) == text.index("あ")


def test_prev_word_start_han_run():
    text = "abc 你好世界"
    result = find_prev_word_start(text, len(text))
    assert text.index("你") <= result < len(text)
    assert all(is_han(ch) for ch in text[result:])


def test_next_word_end_basic():
    text = "hello world"
    assert find_next_word_end(text, 0) == len("hello")
    assert find_next_word_end(text, len("hello")) == len(text)


def test_next_word_end_at_end():
    text = "hello"
    assert find_next_word_end(text, len(text)) == len(text)


def test_next_word_end_script_boundary():
    text = "abcアイウ"
    assert find_next_word_end(text, 0) == text.index("ア")


def test_next_word_end_han_run():
    text = "你好世界 x"
    result = find_next_word_end(text, 0)
    assert 0 < result <= text.index(" ")
    assert all(is_han(ch) for ch in text[:result])


def test_query_insert_and_delete_char():
    q = QueryInput()
    for ch in "abc":
        q.insert(ch)
    assert q.text == "abc"
    assert q.cursor == len("abc")
    assert q.delete_char_backward()
    assert q.text == "ab"
    q.move_home()
    assert not q.delete_char_backward()
    assert q.text == "ab"


def test_query_insert_in_middle():
    q = QueryInput("ac", 1)
    q.insert("b")
    assert q.text == "abc"
    assert q.cursor == 2


def test_query_delete_word_backward():
    q = QueryInput("hello world", len("hello world"))
    assert q.delete_word_backward()
    assert q.text == "hello "
    assert q.cursor == len("hello ")
    assert q.delete_word_backward()
    assert q.text == ""
    assert q.cursor == 0


def test_query_cursor_moves():
    q = QueryInput("hello world", 0)
    q.move_right()
    assert q.cursor == 1
    q.move_left()
    q.move_left()
    assert q.cursor == 0
    q.move_word_right()
    assert q.cursor == len("hello")
    q.move_end()
    assert q.cursor == len("hello world")
    q.move_right()
    assert q.cursor == len("hello world")
    q.move_word_left()
    assert q.cursor == "hello world".index("world")


def test_query_clear():
    q = QueryInput("text", 2)
    q.clear()
    assert (q.text, q.cursor) == ("", 0)


def test_path_delete_segment_trailing_slash():
    p = PathInput("/home/user/projects/", len("/home/user/projects/"), home=None)
    p.delete_segment_backward()
    assert p.text == "/home/user/"
    assert p.cursor == len("/home/user/")


def test_path_delete_segment_partial():
    p = PathInput("/home/user/proj", len("/home/user/proj"), home=None)
    p.delete_segment_backward()
    assert p.text == "/home/user/"


def test_path_segment_moves():
    text = "/home/user/projects"
    p = PathInput(text, len(text), home=None)
    p.move_segment_left()
    assert p.cursor == text.index("projects")
    p.move_home()
    p.move_segment_right()
    assert p.cursor == text.index("/user")
    p.move_segment_right()
    assert p.cursor == text.index("/projects")
    p.move_segment_right()
    assert p.cursor == len(text)


def test_path_backspace_and_insert():
    p = PathInput("/tm", 3, home=None)
    p.insert("p")
    assert p.text == "/tmp"
    p.backspace()
    assert p.text == "/tm"
    p.clear()
    assert (p.text, p.cursor) == ("", 0)


def test_common_prefix():
    assert common_prefix(["alpha", "alphabet"]) == "alpha"
    assert common_prefix(["only"]) == "only"


def test_complete_unique(tmp_path):
    (tmp_path / "projects").mkdir()
    (tmp_path / "other").mkdir()
    p = PathInput(str(tmp_path / "pro"), 0, home=None)
    assert p.complete()
    assert p.text == str(tmp_path / "projects") + "/"
    assert p.cursor == len(p.text)


def test_complete_common_prefix(tmp_path):
    (tmp_path / "alpha").mkdir()
    (tmp_path / "alphabet").mkdir()
    p = PathInput(str(tmp_path / "al"), 0, home=None)
    p.complete()
    assert p.text == str(tmp_path / "alpha")


def test_complete_ignores_files_and_hidden(tmp_path):
    (tmp_path / "data.txt").write_text("x")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / "visible").mkdir()
    p = PathInput(str(tmp_path) + "/", 0, home=None)
    assert p.complete()
    assert p.text == str(tmp_path / "visible") + "/"


def test_complete_hidden_with_dot_prefix(tmp_path):
    (tmp_path / ".hidden").mkdir()
    p = PathInput(str(tmp_path / ".h"), 0, home=None)
    assert p.complete()
    assert p.text == str(tmp_path / ".hidden") + "/"


def test_complete_no_match(tmp_path):
    original = str(tmp_path / "zzz")
    p = PathInput(original, 0, home=None)
    assert not p.complete()
    assert p.text == original


def test_complete_keeps_tilde(tmp_path):
    (tmp_path / "work").mkdir()
    p = PathInput("~/wo", 4, home=str(tmp_path))
    assert p.complete()
    assert p.text == "~/work/"
    assert p.cursor == len("~/work/")
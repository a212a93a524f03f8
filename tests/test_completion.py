import pytest

from sh21.completion import complete, complete_in_directory, word_at
from sh21.errors import ShellError


def test_word_at_end_of_line():
    assert word_at("echo hello", 10) == "hello"


def test_word_at_space_after_word():
    assert word_at("echo hello", 4) == "echo"


def test_word_inside_word():
    assert word_at("abc def", 1) == "abc"


def test_word_at_space_after_space_is_none():
    assert word_at("echo  x", 5) is None


def test_word_at_empty_line_is_none():
    assert word_at("", 0) is None
    assert word_at(None, 0) is None


def test_complete_at_end():
    line = "cat fo"
    result = complete(line, len(line), ["bar", "foo.txt"])
    assert result == ("cat foo.txt", len("cat foo.txt"))


def test_complete_moves_to_word_end_first():
    new_line, pos = complete("cat fo x", 5, ["foo"])
    assert new_line == "cat foo x"
    assert pos == new_line.index(" x")


def test_first_match_wins():
    new_line, _ = complete("ls a", 4, ["abc", "abd"])
    assert new_line == "ls abc"


def test_no_match_returns_none():
    assert complete("ls zz", 5, ["abc", "def"]) is None


def test_complete_in_directory(tmp_path):
    (tmp_path / "alpha.txt").write_text("", encoding="utf-8")
    line = "cat al"
    assert complete_in_directory(line, len(line), tmp_path) == (
        "cat alpha.txt",
        len("cat alpha.txt"),
    )


def test_complete_in_missing_directory_raises(tmp_path):
    with pytest.raises(ShellError):
        complete_in_directory("ls a", 4, tmp_path / "missing")
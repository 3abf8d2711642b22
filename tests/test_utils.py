import pytest

from ircserv.utils import args_split, comma_split, first_word, split_lines, time_to_string


def test_first_word_stops_at_space():
    word = "NICK"
    assert first_word(word + " alice bob") == word


def test_first_word_without_space_returns_everything():
    word = "QUIT"
    assert first_word(word) == word


def test_first_word_leading_space_gives_empty():
    assert first_word(" alice") == ""


def test_time_to_string_whole_seconds():
    assert time_to_string(1700000000) == "1700000000"


def test_time_to_string_truncates_fraction():
    assert time_to_string(12.9) == str(12)


@pytest.mark.parametrize(
    "parts",
    [["JOIN", "#room"], ["MODE", "#room", "+k", "secret"], ["QUIT"]],
)
def test_args_split_round_trip(parts):
    assert args_split("  ".join(parts)) == parts
    assert args_split("\t" + " ".join(parts) + "  \r") == parts


def test_args_split_empty():
    assert args_split("   ") == []


@pytest.mark.parametrize("parts", [["a", "b", "c"], ["room"], ["a", "", "b"], ["", "x"]])
def test_comma_split_round_trip(parts):
    assert comma_split(",".join(parts)) == parts


def test_comma_split_drops_single_trailing_empty():
    parts = ["one", "two"]
    assert comma_split(",".join(parts) + ",") == parts


def test_comma_split_empty_string():
    assert comma_split("") == []


def test_split_lines_skips_empty_lines():
    lines = ["PASS secret", "NICK alice"]
    data = "\n".join(lines) + "\n\n"
    assert split_lines(data) == lines


def test_split_lines_keeps_carriage_returns():
    result = split_lines("JOIN x\r\nPART x\r\n")
    assert all(line.endswith("\r") for line in result)
    assert len(result) == 2
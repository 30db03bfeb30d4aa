"""Tests for the keystroke-level typing test state machine."""

from __future__ import annotations

import pytest

from storytyper.typing_test import BACKSPACE, CONTROL, ENTER, TAB, Key, Test


def _type(test: Test, keys: str) -> None:
    for c in keys:
        test.handle_key(Key(c))


def test_typing_word_and_space_advances_one_word() -> None:
    test = Test(["cat", "dog", "emu"])
    _type(test, "cat ")

    assert test.current_word == 1
    assert test.words[0].progress == "cat"
    assert [e.correct for e in test.words[0].events] == [True, True, True, True]


def test_enter_finishes_word_like_space() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cat")
    test.handle_key(Key(ENTER))

    assert test.current_word == 1


def test_wrong_word_is_recorded_incorrect_on_space() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cut ")

    assert test.current_word == 1
    assert test.words[0].events[-1].correct is False


def test_space_with_empty_progress_is_ignored() -> None:
    test = Test(["cat", "dog"])
    test.handle_key(Key(" "))

    assert test.current_word == 0
    assert test.words[0].events == []


def test_space_skips_empty_target_word() -> None:
    test = Test(["", "dog"])
    test.handle_key(Key(" "))

    assert test.current_word == 1
    assert test.words[0].events[0].correct is True


def test_space_inside_multi_word_target_is_typed() -> None:
    test = Test(["ice cream", "cone"])
    _type(test, "ice ")

    assert test.current_word == 0
    assert test.words[0].progress == "ice "
    assert test.words[0].events[-1].correct is True


def test_backspace_shrinks_progress_by_one() -> None:
    test = Test(["cat", "dog"])
    _type(test, "ca")
    test.handle_key(Key(BACKSPACE))

    assert test.words[0].progress == "c"
    assert test.current_word == 0
    # Removing a correct character is itself a mistake
    assert test.words[0].events[-1].correct is False


def test_backspace_over_typo_counts_as_correct() -> None:
    test = Test(["cat"])
    _type(test, "cx")
    test.handle_key(Key(BACKSPACE))

    assert test.words[0].progress == "c"
    assert test.words[0].events[-1].correct is True


def test_backspace_on_first_empty_word_stays_put() -> None:
    test = Test(["cat", "dog"])
    test.handle_key(Key(BACKSPACE))

    assert test.current_word == 0
    assert test.words[0].events == []


def test_backspace_on_empty_word_returns_to_previous() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cat ")
    recorded = len(test.words[0].events)
    test.handle_key(Key(BACKSPACE))

    assert test.current_word == 0
    assert test.words[0].progress == "cat"
    assert len(test.words[0].events) == recorded


def test_clear_word_empties_progress_with_unclassified_event() -> None:
    test = Test(["cat", "dog"])
    _type(test, "ca")
    test.handle_key(Key("h", frozenset([CONTROL])))

    assert test.words[0].progress == ""
    assert test.words[0].events[-1].correct is None


def test_clear_word_on_empty_progress_clears_previous_word() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cat ")
    test.handle_key(Key("w", frozenset([CONTROL])))

    assert test.current_word == 0
    assert test.words[0].progress == ""
    assert test.words[0].events[-1].correct is None
    assert test.words[1].events == []


@pytest.mark.parametrize("key", [Key(TAB), Key("x", frozenset([CONTROL])), Key("Up")])
def test_unhandled_keys_are_ignored(key: Key) -> None:
    test = Test(["cat"])
    test.handle_key(key)

    assert test.words[0].progress == ""
    assert test.words[0].events == []


def test_round_trip_two_words_completes() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cat dog ")

    assert test.complete is True
    assert test.current_word == 0
    assert [w.progress for w in test.words] == ["cat", "dog"]
    assert all(e.correct is True for e in test.events())


def test_typo_is_recorded_incorrect() -> None:
    test = Test(["cat"])
    _type(test, "cax")

    assert test.words[0].progress == "cax"
    assert test.words[0].events[-1].correct is False
    assert test.complete is False


def test_last_word_typed_exactly_completes_without_space() -> None:
    test = Test(["go"])
    _type(test, "go")

    assert test.complete is True
    assert test.current_word == 0


def test_space_after_wrong_last_word_completes() -> None:
    test = Test(["cat", "dog"])
    _type(test, "cat dig ")

    assert test.complete is True
    assert test.current_word == 0
    assert test.words[1].events[-1].correct is False


def test_keys_after_completion_are_ignored() -> None:
    test = Test(["go"])
    _type(test, "go")
    recorded = len(test.events())
    _type(test, "abc ")
    test.handle_key(Key(BACKSPACE))

    assert test.complete is True
    assert test.current_word == 0
    assert len(test.events()) == recorded
    assert test.words[0].progress == "go"


def test_key_str_shows_modifiers() -> None:
    assert str(Key("h", frozenset([CONTROL]))) == "Control+h"
    assert str(Key(" ")) == "' '"

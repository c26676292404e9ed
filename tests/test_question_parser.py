from __future__ import annotations

import time

import pytest

from conftest import TEN_QUESTION_KEYS, WATER_BLOCK, make_block, make_completion
from llmquiz.generation.question_parser import (
    MarkerPosition,
    QuestionParser,
    match_block,
    parse_questions,
    split_blocks,
)
from llmquiz.generation.schemas import FORMAT_ERROR_OPTIONS, FORMAT_ERROR_TEXT, Question


def test_ten_blocks_keep_order_and_keys():
    questions = parse_questions(make_completion(TEN_QUESTION_KEYS))

    assert len(questions) == 10
    assert [q.correct_key for q in questions] == TEN_QUESTION_KEYS
    assert [q.text for q in questions] == [f"Question number {i}?" for i in range(1, 11)]
    assert not any(q.format_error for q in questions)


def test_marker_on_b_is_stripped():
    [question] = parse_questions(WATER_BLOCK)

    assert question.text == "At what temperature does water boil?"
    assert question.correct_key == "b"
    assert question.options == {"a": "50C", "b": "100C", "c": "200C"}
    assert list(question.options) == ["a", "b", "c"]


@pytest.mark.parametrize("key", ["a", "b", "c"])
def test_each_marker_position(key):
    result = match_block(make_block(1, key))

    assert result.position is MarkerPosition(key)
    assert result.options[key] == f"Option {key.upper()} of 1"
    assert all("(ok)" not in text for text in result.options.values())


def test_unmatched_block_becomes_single_sentinel():
    questions = parse_questions("Here are some questions about the text.")

    assert len(questions) == 1
    sentinel = questions[0]
    assert sentinel.format_error
    assert sentinel.text == FORMAT_ERROR_TEXT
    assert sentinel.options == FORMAT_ERROR_OPTIONS
    assert sentinel.correct_key == "a"


def test_sentinel_keeps_position_among_valid_blocks():
    raw = "\n\n".join([
        make_block(1, "a"),
        "2. A question without options",
        make_block(3, "c"),
    ])
    questions = parse_questions(raw)

    assert [q.format_error for q in questions] == [False, True, False]
    assert [q.correct_key for q in questions] == ["a", "a", "c"]


@pytest.mark.parametrize("block", [
    # no marker
    "1. Question?\na) one\nb) two\nc) three",
    # two markers
    "1. Question?\na) one (ok)\nb) two (ok)\nc) three",
    # options out of order
    "1. Question?\nb) two (ok)\na) one\nc) three",
    # missing option c
    "1. Question?\na) one\nb) two (ok)",
    # no numbering prefix
    "Question?\na) one\nb) two (ok)\nc) three",
    # marker with nothing before it
    "1. Question?\na) one\nb) two\nc) (ok)",
    # a fourth option
    "1. Question?\na) one\nb) two (ok)\nc) three\nd) four",
])
def test_malformed_blocks_do_not_match(block):
    assert match_block(block).position is MarkerPosition.NO_MATCH
    assert parse_questions(block)[0].format_error


def test_reparse_is_stable():
    raw = make_completion(TEN_QUESTION_KEYS) + "\n\nnot a question"
    first = parse_questions(raw)
    second = QuestionParser().parse(raw)

    assert len(first) == len(second) == 11
    assert [q.correct_key for q in first] == [q.correct_key for q in second]
    assert first == second


def test_tolerates_crlf_indentation_and_extra_blank_lines():
    raw = (
        "\r\n1. Capital of France?\r\n  a) Paris (OK)\r\n  b) Rome\r\n  c) Madrid\r\n"
        "\r\n\r\n\r\n"
        "2) Largest planet?\r\nA) Mars\r\nB) Jupiter (ok)\r\nC) Venus\r\n\r\n"
    )
    questions = parse_questions(raw)

    assert [q.correct_key for q in questions] == ["a", "b"]
    assert questions[0].options["a"] == "Paris"
    assert questions[1].text == "Largest planet?"
    assert questions[1].options == {"a": "Mars", "b": "Jupiter", "c": "Venus"}


def test_markup_is_kept_verbatim():
    block = "1. What does <b>H2O</b> stand for?\na) Water & ice (ok)\nb) <i>Hydrogen</i>\nc) Oxygen"
    [question] = parse_questions(block)

    assert question.text == "What does <b>H2O</b> stand for?"
    assert question.options["a"] == "Water & ice"


def test_empty_and_blank_input():
    assert parse_questions("") == []
    assert parse_questions("\n\n   \n\n") == []
    assert split_blocks("a\n\n\n\nb") == ["a", "b"]


def test_question_model_rejects_bad_shape():
    with pytest.raises(ValueError):
        Question(text="q", options={"a": "1", "b": "2"}, correct_key="a")
    with pytest.raises(ValueError):
        Question(text="q", options={"a": "1", "b": "2", "c": "3"}, correct_key="d")


@pytest.mark.parametrize("pad", [25, 100, 3000])
def test_padded_malformed_block_fails_fast(pad):
    spaces = " " * pad
    block = f"1. Q{spaces}\na) x{spaces}\nb) y{spaces}\nc) z{spaces}\nd) w"

    started = time.perf_counter()
    result = match_block(block)

    assert result.position is MarkerPosition.NO_MATCH
    assert time.perf_counter() - started < 1.0


def test_trailing_whitespace_is_not_captured():
    block = "1. Boiling point?   \na)  50C  \t\nb) 100C \t (ok)   \nc) 200C \t"
    [question] = parse_questions(block)

    assert question.text == "Boiling point?"
    assert question.options == {"a": "50C", "b": "100C", "c": "200C"}
    assert question.correct_key == "b"


def test_wrapped_question_text_is_joined():
    block = (
        "1. Which statement is true about the\n"
        "boiling point of water at sea level?\n"
        "a) 50C\nb) 100C (ok)\nc) 200C"
    )
    [question] = parse_questions(block)

    assert not question.format_error
    assert question.text == "Which statement is true about the boiling point of water at sea level?"
    assert question.correct_key == "b"

"""Tests for inline reasoning markup extraction."""

import pytest

from llm_translate.providers.thinking import BlockKind, ThinkingExtractor, extract_thinking


def _feed_all(chunks):
    extractor = ThinkingExtractor()
    for chunk in chunks:
        extractor.feed(chunk)
    return extractor.finish()


def test_complete_block_round_trip():
    assert extract_thinking("A<think>plan</think>B") == ("AB", "plan")


def test_unclosed_block_stays_reasoning():
    assert extract_thinking("Hello <think>still going") == ("Hello", "still going")


def test_tags_are_case_insensitive():
    assert extract_thinking("<THINK>x</Think>answer") == ("answer", "x")


def test_all_tag_kinds_are_extracted_in_order():
    text = "<thinking>a</thinking>b<reasoning>c</reasoning>d<think>e</think>"
    assert extract_thinking(text) == ("bd", "ace")


def test_stray_markers_are_removed_from_visible_text():
    assert extract_thinking("a</think>b</reasoning>c") == ("abc", "")


def test_nested_other_kind_markers_inside_block_are_dropped():
    visible, reasoning = extract_thinking("<think>a<reasoning>b</reasoning>c</think>d")
    assert visible == "d"
    assert reasoning == "abc"


def test_plain_text_untouched():
    assert extract_thinking("  1 < 2 and 3 > 2  ") == ("1 < 2 and 3 > 2", "")


def test_extraction_is_idempotent_on_visible_output():
    visible, _ = extract_thinking("x<think>y</think>z <reasoning>w</reasoning>")
    assert extract_thinking(visible) == (visible, "")


@pytest.mark.parametrize(
    "text",
    [
        "A<think>plan</think>B",
        "Bonjour <thinking>the user wants French</thinking>le monde",
        "<reasoning>r1</reasoning>visible<think>unclosed",
        "1 < 2 <thin not a tag </th",
        "a</think>b<THINK>C</think>",
    ],
)
def test_chunk_boundaries_do_not_change_result(text):
    expected = extract_thinking(text)

    assert _feed_all(list(text)) == expected
    for split in range(len(text) + 1):
        assert _feed_all([text[:split], text[split:]]) == expected


def test_visible_output_only_grows():
    extractor = ThinkingExtractor()
    previous_visible = ""
    previous_reasoning = ""
    for char in "Hi <think>hidden</think> there <thi":
        visible_added, reasoning_added = extractor.feed(char)
        assert extractor.visible == previous_visible + visible_added
        assert extractor.reasoning == previous_reasoning + reasoning_added
        previous_visible = extractor.visible
        previous_reasoning = extractor.reasoning

    assert "hidden" not in extractor.visible
    assert extractor.reasoning == "hidden"


def test_possible_marker_is_held_back_until_decided():
    extractor = ThinkingExtractor()

    assert extractor.feed("1 <") == ("1 ", "")
    assert extractor.feed(" 2") == ("< 2", "")


def test_partial_marker_at_end_of_stream_is_literal_text():
    extractor = ThinkingExtractor()
    extractor.feed("answer <thin")

    assert extractor.flush() == ("<thin", "")
    assert extractor.visible == "answer <thin"


def test_state_tracks_open_block_kind():
    extractor = ThinkingExtractor()
    extractor.feed("<thinking>abc")

    assert extractor.state.inside_block is True
    assert extractor.state.block_kind == BlockKind.THINKING

    extractor.feed("</thinking>done")
    assert extractor.state.inside_block is False
    assert extractor.state.block_kind == BlockKind.NONE
    assert extractor.finish() == ("done", "abc")


def test_unclosed_block_grows_reasoning_while_visible_stays_fixed():
    extractor = ThinkingExtractor()
    reasoning_seen = []

    for piece in ["Hello ", "<th", "ink>reas", "oning so", " far"]:
        extractor.feed(piece)
        assert extractor.visible == "Hello "
        assert "<" not in extractor.visible
        assert "<" not in extractor.reasoning
        reasoning_seen.append(extractor.reasoning)

    assert reasoning_seen == ["", "", "reas", "reasoning so", "reasoning so far"]
    assert extractor.finish() == ("Hello", "reasoning so far")

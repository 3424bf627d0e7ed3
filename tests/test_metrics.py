import pytest

from ocreval.metrics import (
    Deletion,
    Insertion,
    Match,
    Substitution,
    WordBreakdown,
    character_error,
    extract_punctuation,
    match_paragraphs,
    paragraph_f1,
    punctuation_accuracy,
    split_paragraphs,
    tokenize_words,
    word_error,
)

TEXTS = [
    "",
    "the cat sat",
    "Hello, world!\n\nSecond paragraph (with parens) - and a dash.",
    "  leading and trailing  \r\n\r\n  whitespace  ",
]


@pytest.mark.parametrize("text", TEXTS)
def test_identical_texts_score_perfectly(text: str) -> None:
    assert character_error(text, text).score == 0
    assert word_error(text, text).score == 0
    assert punctuation_accuracy(text, text).score == 1
    assert paragraph_f1(text, text).score == 1


def test_character_error_ignores_whitespace() -> None:
    ocr = "abxd"
    assert character_error("ab cd", ocr) == character_error("abcd", ocr)
    details = character_error("a b\tc\nd", "abcd")
    assert details.score == 0
    assert details.denominator == 4


def test_character_error_counts() -> None:
    details = character_error("hello world", "hallo world")
    assert details.numerator == 1
    assert details.denominator == 10
    assert details.score == pytest.approx(0.1)


def test_character_error_empty_truth() -> None:
    details = character_error("", "x")
    assert details.score == 1
    assert details.denominator == 0
    assert details.numerator == 1
    assert character_error(" \n ", "").score == 0


def test_word_error_substitution_scenario() -> None:
    details = word_error("the cat sat", "the dog sat")
    assert details.score == pytest.approx(1 / 3)
    assert details.breakdown == WordBreakdown(substitutions=1, insertions=0, deletions=0)
    assert details.numerator == 1
    assert details.denominator == 3
    assert list(details.diffs) == [Match("the"), Substitution("cat", "dog"), Match("sat")]


def test_word_error_insertion_and_deletion() -> None:
    inserted = word_error("a b", "a x b")
    assert list(inserted.diffs) == [Match("a"), Insertion("x"), Match("b")]
    assert inserted.breakdown.insertions == 1
    assert inserted.score == pytest.approx(0.5)

    deleted = word_error("a b c", "a c")
    assert list(deleted.diffs) == [Match("a"), Deletion("b"), Match("c")]
    assert deleted.breakdown.deletions == 1
    assert deleted.score == pytest.approx(1 / 3)


def test_word_error_prefers_substitution_on_ties() -> None:
    details = word_error("a b", "b a")
    assert details.breakdown == WordBreakdown(substitutions=2)
    assert [item.type for item in details.diffs] == ["substitution", "substitution"]


def test_word_error_is_case_sensitive() -> None:
    details = word_error("The cat", "the cat")
    assert details.breakdown.substitutions == 1


def test_word_error_empty_sides() -> None:
    details = word_error("", "x y")
    assert details.score == 1
    assert details.denominator == 0
    assert [item.type for item in details.diffs] == ["insertion", "insertion"]
    assert word_error("", "   ").score == 0

    missing = word_error("a b", "")
    assert missing.score == 1
    assert list(missing.diffs) == [Deletion("a"), Deletion("b")]


def test_diff_reproduces_both_word_sequences() -> None:
    truth = "It was the best of times, it was the worst of times"
    ocr = "It wos the best of of times it was worst times ."
    details = word_error(truth, ocr)
    truth_side = [item.truth for item in details.diffs if item.type != "insertion"]
    ocr_side = [item.ocr for item in details.diffs if item.type != "deletion"]
    assert truth_side == tokenize_words(truth)
    assert ocr_side == tokenize_words(ocr)
    breakdown = details.breakdown
    assert breakdown.substitutions + breakdown.insertions + breakdown.deletions == details.numerator


def test_diff_items_carry_side_by_type() -> None:
    assert Insertion("x").truth is None
    assert Deletion("x").ocr is None
    assert Match("x").truth == Match("x").ocr == "x"


def test_punctuation_extraction_order() -> None:
    assert extract_punctuation("“Hi,” she said (quietly) - ok?") == [
        "“", ",", "”", "(", ")", "-", "?",
    ]


def test_punctuation_missing_mark() -> None:
    details = punctuation_accuracy("Hello, world.", "Hello, world")
    assert details.score == pytest.approx(0.5)
    assert details.numerator == 1
    assert details.denominator == 2


def test_punctuation_score_floors_at_zero() -> None:
    assert punctuation_accuracy("end.", "e.n.d.!.").score == 0


def test_punctuation_empty_truth() -> None:
    assert punctuation_accuracy("no marks", "still none").score == 1
    details = punctuation_accuracy("no marks", "one!")
    assert details.score == 0
    assert details.denominator == 0


def test_split_paragraphs() -> None:
    assert split_paragraphs("Hello\r\n\r\nWorld") == ["Hello", "World"]
    assert split_paragraphs("A line\nstill one\n  \n\n\nB") == ["Alinestillone", "B"]
    assert split_paragraphs("\n\n   \n\n") == []


def test_paragraph_f1_within_tolerance() -> None:
    truth = "The quick brown fox jumps over the lazy dog\n\nGoodbye and thanks for all the fish"
    ocr = "The quick brown f0x jumps over the lazy dog\n\nGoodbye and thanks for all the fish!"
    details = paragraph_f1(truth, ocr)
    assert details.score == pytest.approx(1.0)
    assert details.numerator == 2
    assert details.matches == ((0, 0), (1, 1))


def test_paragraph_f1_short_paragraph_outside_tolerance() -> None:
    # One extra character on a seven character paragraph is over the 10% limit.
    details = paragraph_f1("Hello world\n\nGoodbye", "Hello world\n\nGoodbye!")
    assert details.numerator == 1
    assert details.precision == pytest.approx(0.5)
    assert details.recall == pytest.approx(0.5)
    assert details.score == pytest.approx(0.5)


def test_paragraph_f1_merged_paragraphs() -> None:
    details = paragraph_f1("First block here\n\nSecond block here", "First block here Second block here")
    assert details.ocr_paragraphs == 1
    assert details.score == 0


def test_paragraph_f1_empty_truth() -> None:
    assert paragraph_f1("", "").score == 1
    details = paragraph_f1("\n\n", "text")
    assert details.score == 0
    assert details.denominator == 0


def test_paragraph_f1_empty_ocr() -> None:
    details = paragraph_f1("Some text", "")
    assert details.precision == 0
    assert details.score == 0


def test_length_prefilter_boundary() -> None:
    assert match_paragraphs(["abcdefghij"], ["abcdefghijk"]) == [(0, 0)]
    assert match_paragraphs(["abcdefghij"], ["abcdefghijkl"]) == []


def test_matching_is_greedy_in_truth_order() -> None:
    base = "abcdefghijklmnopqrst"
    truth = [base, "abcdefghijklmnopqrXY"]
    ocr = ["Xbcdefghijklmnopqrst", base]
    # The first truth paragraph claims its exact copy, leaving the second unmatched
    # even though swapping would match both.
    assert match_paragraphs(truth, ocr) == [(0, 1)]
    details = paragraph_f1("\n\n".join(truth), "\n\n".join(ocr))
    assert details.score == pytest.approx(0.5)


def test_custom_threshold() -> None:
    assert paragraph_f1("Hello world\n\nGoodbye", "Hello world\n\nGoodbye!", threshold=0.2, length_tolerance=0.2).score == 1


def test_byte_order_mark_counts_as_whitespace() -> None:
    assert character_error("\ufeffabc", "abc").score == 0
    assert tokenize_words("\ufeffthe cat") == ["the", "cat"]
    assert word_error("\ufeffthe cat sat", "the cat sat").score == 0

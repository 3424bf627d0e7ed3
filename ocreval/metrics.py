"""Scoring functions comparing an OCR text against its ground truth.

Every scorer is a pure function of two strings. Empty inputs are valid and
resolve through explicit policies instead of dividing by zero.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

from .distance import Step, align, edit_distance

# U+FEFF (byte order mark) is whitespace here, as in JavaScript.
WHITESPACE_REGEX = re.compile(r"[\s\ufeff]+")
PARAGRAPH_BREAK_REGEX = re.compile(r"\n\s*\n+")

PUNCTUATION_MARKS = ".,?!:;\"'()-“”‘’"
PARAGRAPH_MATCH_THRESHOLD = 0.1
PARAGRAPH_LENGTH_TOLERANCE = 0.1


@dataclass(frozen=True)
class WordBreakdown:
    substitutions: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def total(self) -> int:
        return self.substitutions + self.insertions + self.deletions


@dataclass(frozen=True)
class MetricDetails:
    """Score of one dimension plus the raw counts it was formed from."""

    score: float
    numerator: int
    denominator: int
    breakdown: Optional[WordBreakdown] = None


@dataclass(frozen=True)
class Match:
    type: ClassVar[str] = "match"

    word: str

    @property
    def truth(self) -> str:
        return self.word

    @property
    def ocr(self) -> str:
        return self.word


@dataclass(frozen=True)
class Substitution:
    type: ClassVar[str] = "substitution"

    truth: str
    ocr: str


@dataclass(frozen=True)
class Insertion:
    type: ClassVar[str] = "insertion"

    ocr: str

    @property
    def truth(self) -> None:
        return None


@dataclass(frozen=True)
class Deletion:
    type: ClassVar[str] = "deletion"

    truth: str

    @property
    def ocr(self) -> None:
        return None


DiffItem = Union[Match, Substitution, Insertion, Deletion]


@dataclass(frozen=True)
class WordErrorDetails(MetricDetails):
    diffs: Tuple[DiffItem, ...] = ()


@dataclass(frozen=True)
class ParagraphDetails(MetricDetails):
    """Paragraph F1 with the match counts behind it.

    ``numerator`` is the number of matched paragraphs and ``denominator`` the
    number of truth paragraphs.
    """

    ocr_paragraphs: int = 0
    precision: float = 0.0
    recall: float = 0.0
    matches: Tuple[Tuple[int, int], ...] = field(default=())


def strip_whitespace(text: str) -> str:
    return WHITESPACE_REGEX.sub("", text)


def tokenize_words(text: str) -> List[str]:
    return [token for token in WHITESPACE_REGEX.split(text.strip()) if token]


def extract_punctuation(text: str, marks: str = PUNCTUATION_MARKS) -> List[str]:
    allowed = set(marks)
    return [char for char in text if char in allowed]


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines and drop all whitespace inside each block."""

    blocks = PARAGRAPH_BREAK_REGEX.split(text.replace("\r", ""))
    stripped = (strip_whitespace(block) for block in blocks)
    return [block for block in stripped if block]


def character_error(truth: str, ocr: str) -> MetricDetails:
    """Character error rate with all whitespace removed from both sides."""

    clean_truth = strip_whitespace(truth)
    clean_ocr = strip_whitespace(ocr)
    if not clean_truth:
        return MetricDetails(
            score=1.0 if clean_ocr else 0.0,
            numerator=len(clean_ocr),
            denominator=0,
        )
    distance = edit_distance(clean_truth, clean_ocr)
    return MetricDetails(
        score=distance / len(clean_truth),
        numerator=distance,
        denominator=len(clean_truth),
    )


def word_error(truth: str, ocr: str) -> WordErrorDetails:
    """Word error rate plus the word-level alignment that produced it."""

    truth_words = tokenize_words(truth)
    ocr_words = tokenize_words(ocr)
    alignment = align(truth_words, ocr_words)

    diffs: List[DiffItem] = []
    substitutions = insertions = deletions = 0
    for step, i, j in alignment.path():
        if step is Step.DIAGONAL:
            truth_word, ocr_word = truth_words[i - 1], ocr_words[j - 1]
            if truth_word == ocr_word:
                diffs.append(Match(truth_word))
            else:
                diffs.append(Substitution(truth_word, ocr_word))
                substitutions += 1
        elif step is Step.LEFT:
            diffs.append(Insertion(ocr_words[j - 1]))
            insertions += 1
        else:
            diffs.append(Deletion(truth_words[i - 1]))
            deletions += 1

    breakdown = WordBreakdown(substitutions, insertions, deletions)
    errors = breakdown.total
    m = len(truth_words)
    if m == 0:
        score = 1.0 if ocr_words else 0.0
    else:
        score = errors / m
    return WordErrorDetails(
        score=score,
        numerator=errors,
        denominator=m,
        breakdown=breakdown,
        diffs=tuple(diffs),
    )


def punctuation_accuracy(
    truth: str, ocr: str, marks: str = PUNCTUATION_MARKS
) -> MetricDetails:
    """How faithfully the ordered sequence of punctuation marks survived."""

    truth_marks = extract_punctuation(truth, marks)
    ocr_marks = extract_punctuation(ocr, marks)
    if not truth_marks:
        return MetricDetails(
            score=0.0 if ocr_marks else 1.0,
            numerator=len(ocr_marks),
            denominator=0,
        )
    distance = edit_distance(truth_marks, ocr_marks)
    return MetricDetails(
        score=max(0.0, 1.0 - distance / len(truth_marks)),
        numerator=distance,
        denominator=len(truth_marks),
    )


def match_paragraphs(
    truth_paragraphs: Sequence[str],
    ocr_paragraphs: Sequence[str],
    threshold: float = PARAGRAPH_MATCH_THRESHOLD,
    length_tolerance: float = PARAGRAPH_LENGTH_TOLERANCE,
) -> List[Tuple[int, int]]:
    """Greedily pair truth paragraphs with unused OCR paragraphs.

    Truth paragraphs are visited in document order and each takes the closest
    remaining OCR paragraph by normalized edit distance, if that distance is
    within ``threshold``. This is not an optimal bipartite assignment: an early
    truth paragraph may claim an OCR block a later one would have matched better.
    """

    used = set()
    matches: List[Tuple[int, int]] = []
    for truth_index, truth_para in enumerate(truth_paragraphs):
        best_index = -1
        best_distance = float("inf")
        for ocr_index, ocr_para in enumerate(ocr_paragraphs):
            if ocr_index in used:
                continue
            if abs(len(truth_para) - len(ocr_para)) / len(truth_para) > length_tolerance:
                continue
            distance = edit_distance(truth_para, ocr_para)
            normalized = distance / max(len(truth_para), len(ocr_para))
            if normalized < best_distance:
                best_distance = normalized
                best_index = ocr_index
        if best_index != -1 and best_distance <= threshold:
            used.add(best_index)
            matches.append((truth_index, best_index))
    return matches


def paragraph_f1(
    truth: str,
    ocr: str,
    threshold: float = PARAGRAPH_MATCH_THRESHOLD,
    length_tolerance: float = PARAGRAPH_LENGTH_TOLERANCE,
) -> ParagraphDetails:
    """F1 over paragraph blocks recovered from the OCR text."""

    truth_paragraphs = split_paragraphs(truth)
    ocr_paragraphs = split_paragraphs(ocr)
    if not truth_paragraphs:
        return ParagraphDetails(
            score=0.0 if ocr_paragraphs else 1.0,
            numerator=0,
            denominator=0,
            ocr_paragraphs=len(ocr_paragraphs),
        )

    matches = match_paragraphs(truth_paragraphs, ocr_paragraphs, threshold, length_tolerance)
    true_positives = len(matches)
    precision = true_positives / len(ocr_paragraphs) if ocr_paragraphs else 0.0
    recall = true_positives / len(truth_paragraphs)
    if precision + recall == 0:
        score = 0.0
    else:
        score = 2 * precision * recall / (precision + recall)
    return ParagraphDetails(
        score=score,
        numerator=true_positives,
        denominator=len(truth_paragraphs),
        ocr_paragraphs=len(ocr_paragraphs),
        precision=precision,
        recall=recall,
        matches=tuple(matches),
    )

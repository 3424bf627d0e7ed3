"""Rendering evaluation results as JSON payloads and plain text."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .config import EvalConfig
from .metrics import DiffItem, MetricDetails
from .service import AggregateMetrics, AnalysisResult

AUDIT_LABELS = {
    "cer": "edit distance / truth characters",
    "wer": "word errors / truth words",
    "punctuation": "edit distance / truth marks",
    "paragraph": "matched paragraphs / truth paragraphs",
}


def audit_trail(details: MetricDetails, label: str) -> str:
    return f"{details.numerator} / {details.denominator} ({label})"


def diff_to_dict(item: DiffItem) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": item.type}
    if item.truth is not None:
        payload["truth"] = item.truth
    if item.ocr is not None:
        payload["ocr"] = item.ocr
    return payload


def details_to_dict(details: MetricDetails) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "score": details.score,
        "numerator": details.numerator,
        "denominator": details.denominator,
    }
    if details.breakdown is not None:
        payload["breakdown"] = {
            "s": details.breakdown.substitutions,
            "i": details.breakdown.insertions,
            "d": details.breakdown.deletions,
        }
    return payload


def result_to_dict(result: AnalysisResult, include_diff: bool = True) -> Dict[str, Any]:
    paragraph = details_to_dict(result.paragraph)
    paragraph.update(
        {
            "ocr_paragraphs": result.paragraph.ocr_paragraphs,
            "precision": result.paragraph.precision,
            "recall": result.paragraph.recall,
        }
    )
    payload: Dict[str, Any] = {
        "pair_id": result.pair_id,
        "truth_file": result.truth_name,
        "ocr_file": result.ocr_name,
        "truth_length": result.truth_length,
        "ocr_length": result.ocr_length,
        "cer": details_to_dict(result.cer),
        "wer": details_to_dict(result.wer),
        "punctuation": details_to_dict(result.punctuation),
        "paragraph": paragraph,
        "audit": {
            "cer": audit_trail(result.cer, AUDIT_LABELS["cer"]),
            "wer": audit_trail(result.wer, AUDIT_LABELS["wer"]),
            "punctuation": audit_trail(result.punctuation, AUDIT_LABELS["punctuation"]),
            "paragraph": audit_trail(result.paragraph, AUDIT_LABELS["paragraph"]),
        },
    }
    if include_diff:
        payload["word_diffs"] = [diff_to_dict(item) for item in result.word_diffs]
    return payload


def aggregate_to_dict(aggregates: Optional[AggregateMetrics]) -> Optional[Dict[str, Any]]:
    if aggregates is None:
        return None
    return {
        "avg_cer": aggregates.avg_cer,
        "avg_wer": aggregates.avg_wer,
        "avg_punctuation": aggregates.avg_punctuation,
        "avg_paragraph_f1": aggregates.avg_paragraph_f1,
        "count": aggregates.count,
    }


def render_diff(diffs: Sequence[DiffItem]) -> str:
    """Inline diff: ``[-missing-]``, ``{+extra+}``, substitutions as both."""

    parts: List[str] = []
    for item in diffs:
        if item.type == "match":
            parts.append(item.truth)
        elif item.type == "deletion":
            parts.append(f"[-{item.truth}-]")
        elif item.type == "insertion":
            parts.append(f"{{+{item.ocr}+}}")
        elif item.type == "substitution":
            parts.append(f"[-{item.truth}-]{{+{item.ocr}+}}")
    return " ".join(parts)


def _percent(value: float) -> str:
    return f"{value * 100:.2f}%"


def render_table(
    results: Sequence[AnalysisResult],
    aggregates: Optional[AggregateMetrics] = None,
    config: Optional[EvalConfig] = None,
) -> str:
    """Fixed-width summary; error rates over the pass thresholds get a ``!``."""

    config = config or EvalConfig()
    header = f"{'File pair':<40} {'CER':>9} {'WER':>9} {'Punct':>9} {'Para F1':>9}"
    lines = [header, "-" * len(header)]
    for result in results:
        name = f"{result.truth_name} vs {result.ocr_name}"
        if len(name) > 40:
            name = name[:37] + "..."
        cer_flag = "!" if result.cer.score > config.pass_cer else " "
        wer_flag = "!" if result.wer.score > config.pass_wer else " "
        lines.append(
            f"{name:<40} {_percent(result.cer.score):>8}{cer_flag}"
            f" {_percent(result.wer.score):>8}{wer_flag}"
            f" {_percent(result.punctuation.score):>9}"
            f" {_percent(result.paragraph.score):>9}"
        )
    if aggregates is not None:
        lines.append("-" * len(header))
        label = f"Average ({aggregates.count} pairs)"
        lines.append(
            f"{label:<40} {_percent(aggregates.avg_cer):>9}"
            f" {_percent(aggregates.avg_wer):>9}"
            f" {_percent(aggregates.avg_punctuation):>9}"
            f" {_percent(aggregates.avg_paragraph_f1):>9}"
        )
    return "\n".join(lines)

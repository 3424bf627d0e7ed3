"""Pairing truth/OCR files and running every scorer over each pair."""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import structlog

from .config import EvalConfig, load_config
from .metrics import (
    DiffItem,
    MetricDetails,
    ParagraphDetails,
    WordErrorDetails,
    character_error,
    paragraph_f1,
    punctuation_accuracy,
    word_error,
)

LOGGER = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FilePair:
    pair_id: str
    truth_path: Optional[Path]
    ocr_path: Optional[Path]

    @property
    def complete(self) -> bool:
        return self.truth_path is not None and self.ocr_path is not None


@dataclass(frozen=True)
class AnalysisResult:
    """All four scores for one truth/OCR pair."""

    pair_id: str
    truth_name: str
    ocr_name: str
    cer: MetricDetails
    wer: WordErrorDetails
    punctuation: MetricDetails
    paragraph: ParagraphDetails
    truth_length: int
    ocr_length: int

    @property
    def word_diffs(self) -> Sequence[DiffItem]:
        return self.wer.diffs


@dataclass(frozen=True)
class AggregateMetrics:
    avg_cer: float
    avg_wer: float
    avg_punctuation: float
    avg_paragraph_f1: float
    count: int


def collect_files(folder: Union[str, Path], pattern: str = "*.txt") -> List[Path]:
    folder_path = Path(folder)
    if not folder_path.is_dir():
        raise NotADirectoryError(folder_path)
    return sorted(p for p in folder_path.glob(pattern) if p.is_file())


def pair_files(truth_files: Sequence[Path], ocr_files: Sequence[Path]) -> List[FilePair]:
    """Pair files by position after sorting each side by file name.

    The shorter side is padded with ``None`` so unmatched files stay visible.
    """

    sorted_truth = sorted(truth_files, key=lambda p: p.name)
    sorted_ocr = sorted(ocr_files, key=lambda p: p.name)
    pairs: List[FilePair] = []
    for index in range(max(len(sorted_truth), len(sorted_ocr))):
        pairs.append(
            FilePair(
                pair_id=f"pair-{index}",
                truth_path=sorted_truth[index] if index < len(sorted_truth) else None,
                ocr_path=sorted_ocr[index] if index < len(sorted_ocr) else None,
            )
        )
    return pairs


def aggregate(results: Sequence[AnalysisResult]) -> Optional[AggregateMetrics]:
    if not results:
        return None
    count = len(results)
    return AggregateMetrics(
        avg_cer=sum(r.cer.score for r in results) / count,
        avg_wer=sum(r.wer.score for r in results) / count,
        avg_punctuation=sum(r.punctuation.score for r in results) / count,
        avg_paragraph_f1=sum(r.paragraph.score for r in results) / count,
        count=count,
    )


class EvaluationService:
    """Main entry point for scoring OCR output against ground truth."""

    def __init__(self, config: Optional[EvalConfig] = None):
        self.config = config or load_config()
        self.logger = LOGGER.bind(module="service")

    def read_text(self, path: Union[str, Path]) -> str:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(file_path)
        if file_path.stat().st_size > self.config.max_file_size_bytes:
            raise ValueError(f"File too large: {file_path}")
        return file_path.read_bytes().decode(
            self.config.encoding, errors=self.config.decode_errors
        )

    def analyze_texts(
        self,
        truth: str,
        ocr: str,
        pair_id: str = "pair-0",
        truth_name: str = "truth",
        ocr_name: str = "ocr",
    ) -> AnalysisResult:
        start = time.perf_counter()
        result = AnalysisResult(
            pair_id=pair_id,
            truth_name=truth_name,
            ocr_name=ocr_name,
            cer=character_error(truth, ocr),
            wer=word_error(truth, ocr),
            punctuation=punctuation_accuracy(truth, ocr, self.config.punctuation_marks),
            paragraph=paragraph_f1(
                truth,
                ocr,
                threshold=self.config.paragraph_match_threshold,
                length_tolerance=self.config.paragraph_length_tolerance,
            ),
            truth_length=len(truth),
            ocr_length=len(ocr),
        )
        self.logger.debug(
            "pair_scored",
            pair_id=pair_id,
            cer=round(result.cer.score, 4),
            wer=round(result.wer.score, 4),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return result

    def analyze_pair(self, pair: FilePair) -> AnalysisResult:
        if not pair.complete:
            raise ValueError(f"Pair {pair.pair_id} is missing a truth or OCR file")
        truth = self.read_text(pair.truth_path)
        ocr = self.read_text(pair.ocr_path)
        return self.analyze_texts(
            truth,
            ocr,
            pair_id=pair.pair_id,
            truth_name=pair.truth_path.name,
            ocr_name=pair.ocr_path.name,
        )

    def evaluate_pairs(self, pairs: Sequence[FilePair]) -> List[AnalysisResult]:
        """Score every complete pair, returning results in pair order."""

        complete: List[FilePair] = []
        for pair in pairs:
            if pair.complete:
                complete.append(pair)
            else:
                self.logger.warning(
                    "pair_incomplete",
                    pair_id=pair.pair_id,
                    truth=str(pair.truth_path) if pair.truth_path else None,
                    ocr=str(pair.ocr_path) if pair.ocr_path else None,
                )

        by_index: Dict[int, AnalysisResult] = {}
        executor = ThreadPoolExecutor(max_workers=max(1, self.config.threads))
        future_map = {
            executor.submit(self.analyze_pair, pair): index
            for index, pair in enumerate(complete)
        }
        try:
            for future in as_completed(future_map, timeout=self.config.batch_timeout):
                by_index[future_map[future]] = future.result()
        except FuturesTimeoutError:
            self.logger.warning(
                "batch_timeout",
                timeout=self.config.batch_timeout,
                scored=len(by_index),
                pending=len(complete) - len(by_index),
            )
            raise TimeoutError(
                f"Batch exceeded {self.config.batch_timeout}s with "
                f"{len(complete) - len(by_index)} pairs unscored"
            ) from None
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        results = [by_index[index] for index in range(len(complete))]
        self.logger.info("batch_complete", pairs=len(pairs), scored=len(results))
        return results

    def evaluate_folders(
        self,
        truth_dir: Union[str, Path],
        ocr_dir: Union[str, Path],
        limit: Optional[int] = None,
    ) -> List[AnalysisResult]:
        pairs = pair_files(
            collect_files(truth_dir, self.config.truth_glob),
            collect_files(ocr_dir, self.config.ocr_glob),
        )
        if limit is not None:
            pairs = pairs[:limit]
        return self.evaluate_pairs(pairs)

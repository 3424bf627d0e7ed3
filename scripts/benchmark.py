"""Time each scorer over a folder of truth/OCR pairs."""
from __future__ import annotations

import argparse
import statistics
import time
from pathlib import Path

from ocreval.metrics import character_error, paragraph_f1, punctuation_accuracy, word_error
from ocreval.service import EvaluationService, collect_files, pair_files

SCORERS = {
    "cer": character_error,
    "wer": word_error,
    "punctuation": punctuation_accuracy,
    "paragraph": paragraph_f1,
}


def benchmark(truth_dir: Path, ocr_dir: Path, repeat: int) -> None:
    service = EvaluationService()
    pairs = [
        p
        for p in pair_files(collect_files(truth_dir), collect_files(ocr_dir))
        if p.complete
    ]
    if not pairs:
        raise SystemExit("No complete file pairs found for benchmarking")
    texts = [(service.read_text(p.truth_path), service.read_text(p.ocr_path)) for p in pairs]
    print(f"Pairs: {len(texts)}")
    print(f"Largest truth: {max(len(truth) for truth, _ in texts)} chars")
    for name, scorer in SCORERS.items():
        durations = []
        for _ in range(repeat):
            for truth, ocr in texts:
                start = time.perf_counter()
                scorer(truth, ocr)
                durations.append((time.perf_counter() - start) * 1000)
        print(
            f"{name:<12} p50: {statistics.median(durations):.2f} ms"
            f"  max: {max(durations):.2f} ms"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark scorer performance")
    parser.add_argument("truth_dir", type=Path, help="Folder with ground truth texts")
    parser.add_argument("ocr_dir", type=Path, help="Folder with OCR texts")
    parser.add_argument("--repeat", type=int, default=3)
    args = parser.parse_args()
    benchmark(args.truth_dir, args.ocr_dir, args.repeat)


if __name__ == "__main__":
    main()

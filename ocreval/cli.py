"""Command line interface for OCR evaluation."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable, Optional

from .config import EvalConfig, load_config, save_default_config
from .log import configure_logging
from .report import (
    AUDIT_LABELS,
    aggregate_to_dict,
    audit_trail,
    render_diff,
    render_table,
    result_to_dict,
)
from .service import EvaluationService, aggregate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score OCR output against ground truth")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=str, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Score a single truth/OCR file pair")
    score_parser.add_argument("--truth", type=Path, required=True)
    score_parser.add_argument("--ocr", type=Path, required=True)
    score_parser.add_argument("--diff", action="store_true", default=False)
    score_parser.add_argument("--json", action="store_true", default=False)

    batch_parser = subparsers.add_parser("batch", help="Score two folders paired by file name")
    batch_parser.add_argument("--truth-dir", type=Path, required=True)
    batch_parser.add_argument("--ocr-dir", type=Path, required=True)
    batch_parser.add_argument("--output", type=Path, default=None)
    batch_parser.add_argument("--threads", type=int, default=None)
    batch_parser.add_argument("--limit", type=int, default=None)
    batch_parser.add_argument("--no-diff", action="store_false", dest="include_diff")

    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument("--path", type=Path, default=None)

    return parser


def handle_score(args: argparse.Namespace, config: EvalConfig) -> None:
    service = EvaluationService(config)
    result = service.analyze_texts(
        service.read_text(args.truth),
        service.read_text(args.ocr),
        truth_name=args.truth.name,
        ocr_name=args.ocr.name,
    )
    if args.json:
        print(json.dumps(result_to_dict(result, include_diff=args.diff), indent=2, ensure_ascii=False))
        return
    print(render_table([result], config=config))
    print()
    for key, details in (
        ("cer", result.cer),
        ("wer", result.wer),
        ("punctuation", result.punctuation),
        ("paragraph", result.paragraph),
    ):
        print(f"{key:<12} {audit_trail(details, AUDIT_LABELS[key])}")
    breakdown = result.wer.breakdown
    print(f"{'':<12} S={breakdown.substitutions} I={breakdown.insertions} D={breakdown.deletions}")
    if args.diff:
        print()
        print(render_diff(result.word_diffs))


def handle_batch(args: argparse.Namespace, config: EvalConfig) -> None:
    if args.threads is not None:
        config.threads = args.threads
    service = EvaluationService(config)
    results = service.evaluate_folders(args.truth_dir, args.ocr_dir, limit=args.limit)
    aggregates = aggregate(results)
    print(render_table(results, aggregates, config))
    if args.output is not None:
        payload = {
            "aggregate": aggregate_to_dict(aggregates),
            "results": [result_to_dict(r, include_diff=args.include_diff) for r in results],
        }
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Saved evaluation report to {args.output}")


def handle_init_config(args: argparse.Namespace) -> None:
    path = save_default_config(args.path)
    print(f"Wrote default configuration to {path}")


def _load_config(config_path: Optional[Path]) -> EvalConfig:
    return load_config(config_path) if config_path else load_config()


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if args.command == "init-config":
        handle_init_config(args)
        return
    config = _load_config(args.config)
    try:
        if args.command == "score":
            handle_score(args, config)
        elif args.command == "batch":
            handle_batch(args, config)
        else:  # pragma: no cover - safeguard
            parser.error(f"Unknown command {args.command}")
    except (FileNotFoundError, NotADirectoryError, TimeoutError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()

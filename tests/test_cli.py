import json
import threading

import pytest

from ocreval import cli
from ocreval.config import EvalConfig, load_config
from ocreval.service import EvaluationService


def test_cli_score_json(tmp_path, capsys):
    truth = tmp_path / "truth.txt"
    ocr = tmp_path / "ocr.txt"
    truth.write_text("the cat sat", encoding="utf-8")
    ocr.write_text("the dog sat", encoding="utf-8")
    cli.main(["score", "--truth", str(truth), "--ocr", str(ocr), "--json", "--diff"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["wer"]["numerator"] == 1
    assert payload["truth_file"] == "truth.txt"
    assert len(payload["word_diffs"]) == 3


def test_cli_score_text_diff(tmp_path, capsys):
    truth = tmp_path / "truth.txt"
    ocr = tmp_path / "ocr.txt"
    truth.write_text("the cat sat", encoding="utf-8")
    ocr.write_text("the dog sat", encoding="utf-8")
    cli.main(["score", "--truth", str(truth), "--ocr", str(ocr), "--diff"])
    out = capsys.readouterr().out
    assert "the [-cat-]{+dog+} sat" in out
    assert "S=1 I=0 D=0" in out


def test_cli_batch(tmp_path, sample_folders):
    truth_dir, ocr_dir = sample_folders
    output_path = tmp_path / "reports" / "report.json"
    cli.main(
        [
            "batch",
            "--truth-dir",
            str(truth_dir),
            "--ocr-dir",
            str(ocr_dir),
            "--output",
            str(output_path),
        ]
    )
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["aggregate"]["count"] == 2
    assert [r["pair_id"] for r in payload["results"]] == ["pair-0", "pair-1"]


def test_cli_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["score", "--truth", str(tmp_path / "no.txt"), "--ocr", str(tmp_path / "no.txt")])


def test_cli_init_config(tmp_path):
    path = tmp_path / "ocreval.yaml"
    cli.main(["init-config", "--path", str(path)])
    assert load_config(path) == EvalConfig()


def test_cli_has_batch_command():
    parser = cli.build_parser()
    subparsers = None
    for action in parser._subparsers._group_actions:  # type: ignore[attr-defined]
        subparsers = action.choices
        break
    assert subparsers is not None
    assert {"score", "batch", "init-config"} <= set(subparsers)


def test_cli_batch_timeout_exits(tmp_path, sample_folders, monkeypatch):
    truth_dir, ocr_dir = sample_folders
    config_path = tmp_path / "ocreval.yaml"
    config_path.write_text("threads: 1\nbatch_timeout: 0.05\n", encoding="utf-8")
    release = threading.Event()

    def slow_pair(self, pair):
        release.wait(5)

    monkeypatch.setattr(EvaluationService, "analyze_pair", slow_pair)
    try:
        with pytest.raises(SystemExit):
            cli.main(
                [
                    "--config",
                    str(config_path),
                    "batch",
                    "--truth-dir",
                    str(truth_dir),
                    "--ocr-dir",
                    str(ocr_dir),
                ]
            )
    finally:
        release.set()

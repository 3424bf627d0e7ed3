"""Configuration management for OCR evaluation runs."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .metrics import (
    PARAGRAPH_LENGTH_TOLERANCE,
    PARAGRAPH_MATCH_THRESHOLD,
    PUNCTUATION_MARKS,
)

LEGACY_KEY_ALIASES = {
    "match_threshold": "paragraph_match_threshold",
    "length_tolerance": "paragraph_length_tolerance",
    "punctuation": "punctuation_marks",
}


@dataclass
class EvalConfig:
    """Tunable options for scoring and for the file-pair layer around it."""

    paragraph_match_threshold: float = PARAGRAPH_MATCH_THRESHOLD
    paragraph_length_tolerance: float = PARAGRAPH_LENGTH_TOLERANCE
    punctuation_marks: str = PUNCTUATION_MARKS
    encoding: str = "utf-8-sig"
    decode_errors: str = "replace"
    truth_glob: str = "*.txt"
    ocr_glob: str = "*.txt"
    threads: int = 4
    batch_timeout: float = 300.0
    max_file_size_mb: int = 20
    pass_cer: float = 0.05
    pass_wer: float = 0.1

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


DEFAULT_CONFIG_PATH = Path("ocreval.yaml")


def _apply_legacy_aliases(data: dict) -> dict:
    for old_key, new_key in LEGACY_KEY_ALIASES.items():
        if old_key in data and new_key not in data:
            data[new_key] = data[old_key]
        if old_key in data:
            data.pop(old_key, None)
    return data


def load_config(path: Optional[Path] = None) -> EvalConfig:
    """Load configuration from a YAML file if it exists."""

    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise TypeError("Configuration file must define a mapping")
        data = _apply_legacy_aliases(dict(data))
        return EvalConfig(**data)
    return EvalConfig()


def save_default_config(path: Optional[Path] = None) -> Path:
    """Write a default configuration file for users to tweak."""

    config_path = path or DEFAULT_CONFIG_PATH
    payload = dataclasses.asdict(EvalConfig())
    with config_path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(payload, fp, sort_keys=False, allow_unicode=True)
    return config_path

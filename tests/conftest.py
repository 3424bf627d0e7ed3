import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SAMPLE_PAIRS = {
    "001.txt": (
        "the cat sat on the mat.\n\nHello, world!",
        "the dog sat on the mat.\n\nHello, world!",
    ),
    "002.txt": (
        "Alpha beta (gamma) delta.",
        "Alpha beta (gamma) delta.",
    ),
}


@pytest.fixture
def sample_folders(tmp_path: Path) -> tuple[Path, Path]:
    """Write matching truth/OCR folders whose files pair by sorted name."""
    truth_dir = tmp_path / "truth"
    ocr_dir = tmp_path / "ocr"
    truth_dir.mkdir()
    ocr_dir.mkdir()
    for name, (truth, ocr) in SAMPLE_PAIRS.items():
        (truth_dir / name).write_text(truth, encoding="utf-8")
        (ocr_dir / name.replace(".txt", "_ocr.txt")).write_text(ocr, encoding="utf-8")
    return truth_dir, ocr_dir

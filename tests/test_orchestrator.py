import json
import threading
import time
from pathlib import Path

import pytest

from throne_ocr.ocr_engines import OCRError
from throne_ocr.orchestrator import OCRBatchProcessor

TURBODEDEK = "28 | PT (Fate x | TurboDedek | Jaune | 13 | 40 | 1343286 | 703574 | 23911"
KAGIBA = "25 | OT 1 Fate x | Kagiba | Jaune | 16 C7 | 1523416 | 33557 1"
LISTRINDA = r"51 | cn | L\12 Suits Y | Listrinda | Rouge | L | 16 | 407 594 | 969 239 | 58 864"
DATE = "2025-06-14 00:00:00"


class FakeEngine:
    """Returns canned text per file name; raises for names missing from texts."""

    def __init__(self, texts, delays=None):
        self.texts = texts
        self.delays = delays or {}
        self.calls = []
        self._lock = threading.Lock()

    def extract_text_from_file(self, image_path):
        name = Path(image_path).name
        time.sleep(self.delays.get(name, 0))
        with self._lock:
            self.calls.append(name)
        if name not in self.texts:
            raise OCRError(f"cannot read {name}")
        return self.texts[name]


def _write_config(tmp_path: Path, registry="TurboDedek,rogue\nListrinda,rogue\n", **extra) -> str:
    registry_path = tmp_path / "class.csv"
    registry_path.write_text(registry, encoding="utf-8")
    out = tmp_path / "out"
    config = {
        "ocr": {"engine": "tesseract", "language": "eng"},
        "filter_color": "y",
        "class_registry": str(registry_path),
        "max_workers": 1,
        "output_paths": {
            "output": str(out / "output.csv"),
            "errors": str(out / "errors.csv"),
            "raw_ocr": str(out / "tesseract_output.txt"),
            "logs": str(tmp_path / "logs"),
        },
    }
    config.update(extra)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return str(path)


def _images(folder: Path, *names):
    folder.mkdir(exist_ok=True)
    for name in names:
        (folder / name).write_bytes(b"")
    return folder


def test_process_folder_writes_all_outputs(tmp_path: Path):
    images = _images(tmp_path / "shots", "b.png", "a.png", "broken.png", "notes.txt")
    engine = FakeEngine({"a.png": TURBODEDEK, "b.png": f"{LISTRINDA}\n{KAGIBA}"})
    processor = OCRBatchProcessor(_write_config(tmp_path), ocr_engine=engine)

    result = processor.process_folder(str(images), DATE)

    assert result.images_processed == 2
    assert result.images_failed == 1
    assert sorted(engine.calls) == ["a.png", "b.png", "broken.png"]

    out = tmp_path / "out"
    assert (out / "output.csv").read_text(encoding="utf-8").splitlines() == [
        "2025-06-14 00:00:00,Suits,TurboDedek,rogue,13,40,1343286,703574,23911",
        "2025-06-14 00:00:00,Enemy,Listrinda,rogue,1,16,407594,969239,58864",
    ]
    assert (out / "errors.csv").read_text(encoding="utf-8").splitlines() == [
        "25OT 1 Fate xKagibaJaune16 C7152341633557 1",
        "",
        "",
        "2025-06-14 00:00:00,Enemy,Listrinda,rogue,1,16,407594,969239,58864",
    ]
    assert (out / "tesseract_output.txt").read_text(encoding="utf-8") == (
        f"{TURBODEDEK}\n{LISTRINDA}\n{KAGIBA}\n"
    )
    assert list((tmp_path / "logs").glob("OCRBatchProcessor_*.log"))


def test_unknown_class_stays_in_output_and_goes_to_diagnostics(tmp_path: Path):
    processor = OCRBatchProcessor(_write_config(tmp_path, registry=""), ocr_engine=FakeEngine({}))

    result = processor.process_text(TURBODEDEK, DATE)

    row = "2025-06-14 00:00:00,Suits,TurboDedek,UNKNOWN,13,40,1343286,703574,23911"
    assert (tmp_path / "out" / "output.csv").read_text(encoding="utf-8").splitlines() == [row]
    assert (tmp_path / "out" / "errors.csv").read_text(encoding="utf-8").splitlines() == [row]
    assert result.validation.validated_count == 0


def test_parallel_extraction_keeps_file_order(tmp_path: Path):
    names = ["1.png", "2.png", "3.png", "4.png"]
    images = _images(tmp_path / "shots", *names)
    engine = FakeEngine(
        {name: f"P{name[0]} | Red | {name[0]} | 10 | 10 | 10 | 10" for name in names},
        delays={"1.png": 0.2, "2.png": 0.1},
    )
    processor = OCRBatchProcessor(_write_config(tmp_path, max_workers=4), ocr_engine=engine)

    text, failed = processor.extract_text(processor.find_images(str(images)))

    assert failed == 0
    assert [line.split(" | ")[0] for line in text.splitlines()] == ["P1", "P2", "P3", "P4"]


def test_process_folder_without_images(tmp_path: Path):
    images = _images(tmp_path / "shots", "readme.md")
    processor = OCRBatchProcessor(_write_config(tmp_path), ocr_engine=FakeEngine({}))

    assert processor.process_folder(str(images), DATE) is None
    assert not (tmp_path / "out" / "output.csv").exists()


def test_process_folder_when_every_image_fails(tmp_path: Path):
    images = _images(tmp_path / "shots", "a.png")
    processor = OCRBatchProcessor(_write_config(tmp_path), ocr_engine=FakeEngine({"a.png": "   "}))

    assert processor.process_folder(str(images), DATE) is None


def test_find_images_requires_directory(tmp_path: Path):
    processor = OCRBatchProcessor(_write_config(tmp_path), ocr_engine=FakeEngine({}))

    with pytest.raises(NotADirectoryError):
        processor.find_images(str(tmp_path / "missing"))


def test_missing_class_registry_is_fatal(tmp_path: Path):
    config_path = _write_config(tmp_path)
    (tmp_path / "class.csv").unlink()

    with pytest.raises(IOError, match="Failed to load player classes"):
        OCRBatchProcessor(config_path, ocr_engine=FakeEngine({}))


def test_invalid_config_is_fatal(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValueError):
        OCRBatchProcessor(_write_config(tmp_path, filter_color="blue"))


def test_debug_must_be_boolean(tmp_path: Path):
    with pytest.raises(ValueError):
        OCRBatchProcessor(_write_config(tmp_path), debug="yes")


class CrashingEngine(FakeEngine):
    """Raises a non-OCR error for one image."""

    def extract_text_from_file(self, image_path):
        if Path(image_path).name == "a.png":
            raise ValueError("bad image data")
        return super().extract_text_from_file(image_path)


@pytest.mark.parametrize("max_workers", [1, 2])
def test_unexpected_engine_error_skips_only_that_image(tmp_path: Path, max_workers):
    images = _images(tmp_path / "shots", "a.png", "b.png")
    engine = CrashingEngine({"b.png": TURBODEDEK})
    processor = OCRBatchProcessor(_write_config(tmp_path, max_workers=max_workers), ocr_engine=engine)

    result = processor.process_folder(str(images), DATE)

    assert result.images_processed == 1
    assert result.images_failed == 1
    assert [p.name for p in result.recognition.players] == ["TurboDedek"]
    assert (tmp_path / "out" / "output.csv").exists()

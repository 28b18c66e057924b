"""Tests for the bookscan command-line entry point."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from src.bookscan.cli import build_parser, main
from src.bookscan.pipeline import BookScanPipeline
from src.bookscan.recognizer import TextRecognizer
from src.bookscan.types import TextCandidate, TextObservation


@pytest.fixture
def pipeline():
    engine = Mock()
    engine.name = "mock"
    engine.recognize.return_value = [
        TextObservation(candidates=(TextCandidate("ISBN4-00-310101-4", 0.9),))
    ]
    return BookScanPipeline(TextRecognizer(engine))


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["a.jpg"])

        assert [str(p) for p in args.images] == ["a.jpg"]
        assert args.config is None
        assert args.no_correction is False
        assert args.json is False

    def test_requires_image(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Test end-to-end CLI runs with a mocked pipeline."""

    def test_text_output(self, pipeline, sample_page_file, capsys):
        with patch.object(BookScanPipeline, "from_config", return_value=pipeline):
            exit_code = main([str(sample_page_file)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "ISBN:  9784003101018" in out

    def test_json_output(self, pipeline, sample_page_file, capsys):
        with patch.object(BookScanPipeline, "from_config", return_value=pipeline) as mock_from:
            exit_code = main(["--json", "--raw", "--no-correction", str(sample_page_file)])

        record = json.loads(capsys.readouterr().out.strip())
        assert exit_code == 0
        assert record["isbn"] == "9784003101018"
        assert record["raw_text"] == "ISBN4-00-310101-4"
        assert record["correction_applied"] is False
        assert mock_from.call_args.kwargs["enable_correction"] is False

    def test_missing_image_fails(self, pipeline, tmp_path, capsys):
        with patch.object(BookScanPipeline, "from_config", return_value=pipeline):
            exit_code = main(["--json", str(tmp_path / "missing.png")])

        record = json.loads(capsys.readouterr().out.strip())
        assert exit_code == 1
        assert record["error"].startswith("OCR-E001")

    def test_initialization_failure(self, sample_page_file):
        with patch.object(
            BookScanPipeline, "from_config", side_effect=RuntimeError("Tesseract not available")
        ):
            assert main([str(sample_page_file)]) == 2

    @pytest.mark.parametrize(
        "content",
        [
            "engine: [unclosed\n",  # YAML syntax error
            "engine:\n  psm: 99\n",  # Out of range
            "recognition:\n  recognition_level: slow\n",  # Unknown level
        ],
    )
    def test_invalid_config_file(self, tmp_path, sample_page_file, capsys, content):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(content)

        assert main(["--config", str(config_file), str(sample_page_file)]) == 2
        assert "initialization failed" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, sample_page_file):
        assert main(["--config", str(tmp_path / "none.yaml"), str(sample_page_file)]) == 2

    def test_unreadable_image_does_not_stop_batch(self, pipeline, tmp_path, sample_page_file, capsys):
        locked = tmp_path / "locked.png"
        locked.write_bytes(sample_page_file.read_bytes())
        real_read_bytes = Path.read_bytes

        def read_bytes(path):
            if path == locked:
                raise PermissionError("denied")
            return real_read_bytes(path)

        with patch.object(BookScanPipeline, "from_config", return_value=pipeline), patch.object(
            Path, "read_bytes", read_bytes
        ):
            exit_code = main(["--json", str(locked), str(sample_page_file)])

        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert exit_code == 1
        assert records[0]["error"].startswith("OCR-E001")
        assert records[1]["isbn"] == "9784003101018"

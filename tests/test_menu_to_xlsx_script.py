"""
scripts/menu_to_xlsx.py — command-line conversion.

Covers:
  - --text input -> workbook with the extracted rows, exit 0
  - image input goes through ocr_worker with the --lang override
  - OcrError -> exit 1, message on stderr, no workbook written
"""

from __future__ import annotations

import importlib.util
import io
from pathlib import Path

import pytest
from openpyxl import load_workbook

from portal import ocr_worker

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "menu_to_xlsx.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("menu_to_xlsx", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def _rows(path: Path):
    ws = load_workbook(io.BytesIO(path.read_bytes())).active
    return [list(r) for r in ws.iter_rows(values_only=True)]


class TestCli:

    def test_text_input(self, cli, tmp_path, capsys):
        src = tmp_path / "ocr.txt"
        src.write_text("Boissons\nEau 2,00\nCafé 1,80€\n", encoding="utf-8")
        out = tmp_path / "out.xlsx"

        assert cli.main([str(src), "--text", "-o", str(out)]) == 0
        assert _rows(out)[1:] == [["Boissons", "Eau", "2,00"], ["Boissons", "Café", "1,80€"]]
        assert "Wrote 2 product(s)" in capsys.readouterr().out

    def test_image_input_with_lang(self, cli, tmp_path, monkeypatch):
        seen = {}

        def fake_file_to_text(path, **kwargs):
            seen.update(kwargs)
            return "Plats\nSteak frites 15,00€\n"

        monkeypatch.setattr(ocr_worker, "file_to_text", fake_file_to_text)
        out = tmp_path / "carte.xlsx"
        assert cli.main([str(tmp_path / "carte.jpg"), "--lang", "eng", "-o", str(out)]) == 0
        assert seen["lang"] == "eng"
        assert _rows(out)[1] == ["Plats", "Steak frites", "15,00€"]

    def test_ocr_failure(self, cli, tmp_path, monkeypatch, capsys):
        def boom(path, **kwargs):
            raise ocr_worker.OcrError("cannot read image")

        monkeypatch.setattr(ocr_worker, "file_to_text", boom)
        out = tmp_path / "never.xlsx"
        assert cli.main([str(tmp_path / "carte.png"), "-o", str(out)]) == 1
        assert not out.exists()
        assert "OCR failed" in capsys.readouterr().err

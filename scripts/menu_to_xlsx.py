#!/usr/bin/env python3
"""
Convert a scanned menu (image or PDF) into products.xlsx from the command line.

    python scripts/menu_to_xlsx.py carte.jpg -o carte.xlsx
    python scripts/menu_to_xlsx.py carte.pdf --lang eng
    python scripts/menu_to_xlsx.py ocr_output.txt --text

Uses the same OCR settings (.env / environment) as the web portal.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from catalog.excel_export import EXPORT_FILENAME, workbook_bytes  # noqa: E402
from catalog.menu_extract import extract_products  # noqa: E402
from portal import ocr_worker  # noqa: E402
from portal.config import Config, ocr_settings  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Menu image/PDF -> products spreadsheet")
    ap.add_argument("input", type=Path, help="menu image, PDF, or (with --text) an OCR text file")
    ap.add_argument("-o", "--output", type=Path, default=Path(EXPORT_FILENAME))
    ap.add_argument("--text", action="store_true", help="input is already-recognized UTF-8 text")
    ap.add_argument("--lang", default=None, help=f"Tesseract language (default: {Config.TESSERACT_LANG})")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=Config.LOG_LEVEL, format="[%(levelname)s] %(name)s: %(message)s")

    if args.text:
        text = args.input.read_text(encoding="utf-8")
    else:
        settings = ocr_settings(vars(Config))
        if args.lang:
            settings["lang"] = args.lang
        try:
            text = ocr_worker.file_to_text(args.input, **settings)
        except ocr_worker.OcrError as e:
            print(f"OCR failed: {e}", file=sys.stderr)
            return 1

    products = extract_products(text)
    args.output.write_bytes(workbook_bytes(products))
    print(f"Wrote {len(products)} product(s) to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

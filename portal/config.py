# portal/config.py
"""
Runtime configuration (env-driven, .env supported).

Every OCR caller reads the recognition language from TESSERACT_LANG, so the
upload route and the CLI always agree on how a menu is read.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

# .env at repo root (TESSERACT_CMD / POPPLER_PATH on machines without PATH entries)
load_dotenv(ROOT / ".env")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class Config:
    """Flask + OCR settings. Class attributes so app.config.from_object() picks them up."""

    # --- Flask ---
    SECRET_KEY = os.getenv("SECRET_KEY") or "dev-secret-change-me"   # replace in prod
    MAX_CONTENT_LENGTH = _int_env("MAX_CONTENT_LENGTH", 20 * 1024 * 1024)  # ~20 MB

    # --- Uploads ---
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER") or str(ROOT / "uploads")
    ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "pdf"}

    # --- OCR ---
    TESSERACT_CMD = os.getenv("TESSERACT_CMD") or None
    TESSERACT_LANG = os.getenv("TESSERACT_LANG") or "fra"
    TESSERACT_CONFIG = os.getenv("TESSERACT_CONFIG") or "--oem 1 --psm 6 -c preserve_interword_spaces=1"
    POPPLER_PATH = os.getenv("POPPLER_PATH") or None
    PDF_DPI = _int_env("PDF_DPI", 300)

    # --- Logging ---
    LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()


def ocr_settings(cfg: Any) -> Dict[str, Any]:
    """Map a Flask config (or any mapping) onto ocr_worker.file_to_text() kwargs."""
    return {
        "lang": cfg.get("TESSERACT_LANG"),
        "config": cfg.get("TESSERACT_CONFIG"),
        "poppler_path": cfg.get("POPPLER_PATH"),
        "pdf_dpi": cfg.get("PDF_DPI"),
        "tesseract_cmd": cfg.get("TESSERACT_CMD"),
    }

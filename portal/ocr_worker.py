# portal/ocr_worker.py
"""
OCR worker: uploaded image/PDF -> plain text for catalog.menu_extract.

Tesseract (via pytesseract) does the recognition; PDFs are rasterized page by
page with pdf2image/poppler first. Failures raise OcrError so the caller can
tell "the scan had no prices" apart from "the scan could not be read".
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytesseract
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError
from PIL import Image, ImageOps, UnidentifiedImageError

log = logging.getLogger(__name__)

OCR_ENGINE = "menu-grid-tesseract"

DEFAULT_LANG = "fra"
DEFAULT_CONFIG = "--oem 1 --psm 6 -c preserve_interword_spaces=1"
DEFAULT_DPI = 300

PDF_EXTENSIONS = {".pdf"}

_WINDOWS_TESSERACT = (
    r"C:\Program Files\Tesseract-OCR\tesseract.exe",
    r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",
)


class OcrError(RuntimeError):
    """The OCR engine could not turn the file into text."""


# ======================================================================
#                         TESSERACT DISCOVERY
# ======================================================================

def configure_tesseract(cmd: Optional[str] = None) -> str:
    """
    Point pytesseract at an executable and return the path in use.

    1) explicit setting, if it exists on disk
    2) PATH
    3) common Windows install locations
    Falls back to whatever pytesseract already has (usually "tesseract").
    """
    if cmd and Path(cmd).exists():
        pytesseract.pytesseract.tesseract_cmd = cmd
        return cmd

    which = shutil.which("tesseract") or shutil.which("tesseract.exe")
    if which:
        pytesseract.pytesseract.tesseract_cmd = which
        return which

    for p in _WINDOWS_TESSERACT:
        if Path(p).exists():
            pytesseract.pytesseract.tesseract_cmd = p
            return p

    return pytesseract.pytesseract.tesseract_cmd


# ======================================================================
#                         PREPROCESSING
# ======================================================================

def _prep_image(img: Image.Image) -> Image.Image:
    """EXIF upright -> grayscale -> autocontrast. Light touch, no binarization."""
    img = ImageOps.exif_transpose(img)
    return ImageOps.autocontrast(img.convert("L"))


# ======================================================================
#                         OCR
# ======================================================================

def image_to_text(
    image: Union[str, Path, Image.Image],
    *,
    lang: str = DEFAULT_LANG,
    config: str = DEFAULT_CONFIG,
) -> str:
    if isinstance(image, Image.Image):
        img = image
    else:
        try:
            img = Image.open(image)
            img.load()
        except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
            raise OcrError(f"cannot read image {image}: {e}") from e

    try:
        return pytesseract.image_to_string(_prep_image(img), lang=lang, config=config) or ""
    except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError) as e:
        raise OcrError(f"tesseract failed: {e}") from e


def pdf_to_text(
    pdf_path: Union[str, Path],
    *,
    lang: str = DEFAULT_LANG,
    config: str = DEFAULT_CONFIG,
    poppler_path: Optional[str] = None,
    dpi: int = DEFAULT_DPI,
) -> str:
    try:
        pages = convert_from_path(str(pdf_path), dpi=dpi, poppler_path=poppler_path)
    except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as e:
        raise OcrError(f"cannot rasterize PDF {pdf_path}: {e}") from e

    log.info("OCR %s: %d page(s) at %d dpi", Path(pdf_path).name, len(pages), dpi)
    texts: List[str] = []
    for pg in pages:
        txt = image_to_text(pg, lang=lang, config=config)
        if txt.strip():
            texts.append(txt)
    return "\n".join(texts)


def file_to_text(
    path: Union[str, Path],
    *,
    lang: Optional[str] = None,
    config: Optional[str] = None,
    poppler_path: Optional[str] = None,
    pdf_dpi: Optional[int] = None,
    tesseract_cmd: Optional[str] = None,
) -> str:
    """OCR an uploaded file; PDFs by extension, everything else as an image."""
    path = Path(path)
    lang = lang or DEFAULT_LANG
    config = config or DEFAULT_CONFIG
    configure_tesseract(tesseract_cmd)

    log.info("OCR %s (lang=%s)", path.name, lang)
    if path.suffix.lower() in PDF_EXTENSIONS:
        return pdf_to_text(path, lang=lang, config=config, poppler_path=poppler_path, dpi=pdf_dpi or DEFAULT_DPI)
    return image_to_text(path, lang=lang, config=config)


# ======================================================================
#                         HEALTH
# ======================================================================

def health(
    *,
    lang: Optional[str] = None,
    tesseract_cmd: Optional[str] = None,
    poppler_path: Optional[str] = None,
) -> Dict[str, Any]:
    cmd = configure_tesseract(tesseract_cmd)
    try:
        version: Optional[str] = str(pytesseract.get_tesseract_version())
    except (pytesseract.TesseractNotFoundError, OSError) as e:
        log.warning("tesseract version probe failed: %s", e)
        version = None

    return {
        "engine": OCR_ENGINE,
        "lang": lang or DEFAULT_LANG,
        "tesseract": {
            "cmd": cmd,
            "version": version,
            "found_on_disk": version is not None,
        },
        "poppler": {
            "path_env": poppler_path or "",
            "present": bool(poppler_path and Path(poppler_path).exists()),
        },
    }

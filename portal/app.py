# portal/app.py
from flask import Blueprint, Flask, current_app, jsonify, make_response, request

# --- Standard libs & typing ---
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

# safer filename + big-file error handling
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from catalog.excel_export import EXPORT_FILENAME, XLSX_MIMETYPE, workbook_bytes
from catalog.menu_extract import extract_products
from catalog.product_types import Product, UnknownFieldError, update_products
from portal import ocr_worker
from portal.config import Config, ocr_settings
from portal.contracts import validate_products_payload, validate_update_payload

log = logging.getLogger(__name__)

bp = Blueprint("menu", __name__)


def _now_iso() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


def allowed_file(filename: str) -> bool:
    exts = current_app.config["ALLOWED_EXTENSIONS"]
    return "." in filename and filename.rsplit(".", 1)[1].lower() in exts


def _error(msg: str, status: int):
    return jsonify({"ok": False, "error": msg}), status


def _json_body() -> Optional[Dict[str, Any]]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _products_out(products: List[Product]) -> List[Dict[str, str]]:
    return [p.to_dict() for p in products]


def _products_in(payload: Mapping[str, Any]) -> List[Product]:
    return [Product.from_dict(p) for p in payload.get("products") or []]


# ------------------------
# Pages
# ------------------------
@bp.get("/")
def index():
    return INDEX_HTML


@bp.get("/health")
def health():
    cfg = current_app.config
    return jsonify({
        "status": "ok",
        "time": _now_iso(),
        "ocr": ocr_worker.health(
            lang=cfg.get("TESSERACT_LANG"),
            tesseract_cmd=cfg.get("TESSERACT_CMD"),
            poppler_path=cfg.get("POPPLER_PATH"),
        ),
    })


# ------------------------
# Upload -> OCR -> products
# ------------------------
@bp.post("/api/upload")
def upload():
    """
    Accept a menu image/PDF, OCR it and return the raw text plus the products
    found in it. The upload is deleted once OCR is done; nothing is kept.
    """
    file = request.files.get("file")
    if not file or not file.filename:
        return _error("No file uploaded.", 400)
    if not allowed_file(file.filename):
        return _error("Unsupported file type. Allowed: JPG, JPEG, PNG, PDF.", 400)

    # secure_filename drops non-ASCII ("Меню.pdf" -> "pdf"); re-attach the
    # validated extension so the OCR worker still sees a .pdf
    stem, ext = file.filename.rsplit(".", 1)
    base_name = f"{secure_filename(stem) or 'upload'}.{ext.lower()}"
    save_path = Path(current_app.config["UPLOAD_FOLDER"]) / f"{uuid.uuid4().hex[:8]}_{base_name}"
    file.save(str(save_path))

    try:
        text = ocr_worker.file_to_text(save_path, **ocr_settings(current_app.config))
    except ocr_worker.OcrError as e:
        log.exception("OCR failed for %s", base_name)
        return _error(f"Error processing file: {e}", 500)
    finally:
        save_path.unlink(missing_ok=True)

    products = extract_products(text)
    log.info("upload %s: %d product(s) extracted", base_name, len(products))
    return jsonify({
        "ok": True,
        "message": "File processed successfully",
        "text": text,
        "products": _products_out(products),
    })


@bp.post("/api/extract")
def extract():
    """Re-run extraction on (possibly hand-corrected) OCR text."""
    data = _json_body()
    if data is None:
        return _error("expected a JSON object body", 400)
    text = data.get("text")
    if not isinstance(text, str):
        return _error("text must be a string", 400)
    return jsonify({"ok": True, "products": _products_out(extract_products(text))})


# ------------------------
# Grid edits + export
# ------------------------
@bp.post("/api/products/update")
def products_update():
    data = _json_body()
    if data is None:
        return _error("expected a JSON object body", 400)
    ok, err = validate_update_payload(data)
    if not ok:
        return _error(f"schema: {err}", 400)

    try:
        products = update_products(_products_in(data), data["index"], data["field"], data["value"])
    except UnknownFieldError as e:
        return _error(str(e), 400)
    except IndexError as e:
        return _error(str(e), 400)

    return jsonify({"ok": True, "products": _products_out(products)})


@bp.post("/api/export.xlsx")
def export_xlsx():
    data = _json_body()
    if data is None:
        return _error("expected a JSON object body", 400)
    ok, err = validate_products_payload(data)
    if not ok:
        return _error(f"schema: {err}", 400)

    products = _products_in(data)
    resp = make_response(workbook_bytes(products))
    resp.headers["Content-Type"] = XLSX_MIMETYPE
    resp.headers["Content-Disposition"] = f'attachment; filename="{EXPORT_FILENAME}"'
    log.info("export: %d row(s)", len(products))
    return resp


def _too_large(_e: RequestEntityTooLarge) -> Tuple[Any, int]:
    limit_mb = (current_app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
    return _error(f"File too large (limit {limit_mb} MB).", 413)


# ------------------------
# App factory
# ------------------------
def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)

    app.register_blueprint(bp)
    app.register_error_handler(RequestEntityTooLarge, _too_large)
    return app


INDEX_HTML = """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Menu → Excel</title>
    <style>
      :root { --bg:#0b1220; --panel:#111a2f; --ink:#e8eefc; --muted:#9fb0d1; --line:#1f2a44; --brand:#7aa2ff; --brandH:#5a86f7; }
      * { box-sizing: border-box; }
      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; margin: 0; background: var(--bg); color: var(--ink); }
      .wrap { max-width: 900px; margin: 32px auto; padding: 0 16px; }
      .card { background: var(--panel); border: 1px solid var(--line); border-radius: 14px; padding: 18px; }
      p { color: var(--muted); }
      .btn { padding: 8px 14px; border-radius: 12px; border: 1px solid var(--brand); background: var(--brand); font-weight: 600; cursor: pointer; }
      .btn:hover { background: var(--brandH); }
      table { width: 100%; border-collapse: collapse; margin: 16px 0; }
      td, th { border-bottom: 1px solid var(--line); padding: 4px; text-align: left; }
      td input { width: 100%; background: transparent; color: var(--ink); border: 0; }
    </style>
  </head>
  <body>
    <div class="wrap">
      <div class="card">
        <h2>Menu Image to Excel Converter</h2>
        <p>Pick a menu photo or PDF. Fix any OCR mistakes in the grid, then download the workbook.</p>
        <form id="up">
          <input type="file" name="file" accept="image/*,.pdf" required />
          <button type="submit" class="btn">Process Image</button>
        </form>
        <p id="status"></p>
        <table id="grid" hidden>
          <thead><tr><th>Catégorie</th><th>Nom du produit</th><th>Prix HT</th></tr></thead>
          <tbody></tbody>
        </table>
        <button id="xlsx" class="btn" hidden>Generate Excel</button>
      </div>
    </div>
    <script>
      let products = [];
      const FIELDS = ["category", "name", "price"];
      const $ = (s) => document.querySelector(s);

      async function post(url, body) {
        const r = await fetch(url, {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify(body)});
        const j = await r.json();
        if (!j.ok) throw new Error(j.error);
        return j;
      }

      function render() {
        const tb = $("#grid tbody");
        tb.innerHTML = "";
        products.forEach((p, index) => {
          const tr = document.createElement("tr");
          FIELDS.forEach((field) => {
            const td = document.createElement("td");
            const inp = document.createElement("input");
            inp.value = p[field];
            inp.onchange = async () => {
              products = (await post("/api/products/update", {products, index, field, value: inp.value})).products;
            };
            td.appendChild(inp);
            tr.appendChild(td);
          });
          tb.appendChild(tr);
        });
        $("#grid").hidden = $("#xlsx").hidden = products.length === 0;
      }

      $("#up").onsubmit = async (e) => {
        e.preventDefault();
        $("#status").textContent = "Processing…";
        const r = await fetch("/api/upload", {method: "POST", body: new FormData(e.target)});
        const j = await r.json();
        $("#status").textContent = j.ok ? `${j.products.length} product(s) found.` : j.error;
        products = j.ok ? j.products : [];
        render();
      };

      $("#xlsx").onclick = async () => {
        const r = await fetch("/api/export.xlsx", {method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({products})});
        const link = document.createElement("a");
        link.href = URL.createObjectURL(await r.blob());
        link.download = "products.xlsx";
        link.click();
      };
    </script>
  </body>
</html>
"""

app = create_app()

if __name__ == "__main__":
    app.run(debug=True)

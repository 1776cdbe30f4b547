from flask import Blueprint, request, current_app, jsonify
from io import BytesIO
from werkzeug.utils import secure_filename
import logging

upload_bp = Blueprint("upload", __name__)

ALLOWED_EXTENSIONS = {"csv", "json"}
logger = logging.getLogger("merchlens.upload")

def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS

@upload_bp.route("/upload", methods=["POST"])
def upload_file():
    """Replace the in-memory catalogue with an uploaded CSV or JSON file."""
    if "file" not in request.files:
        logger.warning("No file part in request")
        return jsonify({"ok": False, "error": "No file part in request"}), 400

    file = request.files["file"]
    if file.filename == "":
        logger.warning("No file selected")
        return jsonify({"ok": False, "error": "No file selected"}), 400

    filename = secure_filename(file.filename)
    if not allowed_file(filename):
        logger.warning("Unsupported file format: %s", filename)
        return jsonify({"ok": False, "error": "Unsupported file format"}), 400

    datastore = current_app.extensions["datastore"]
    try:
        df = datastore.read_file(BytesIO(file.read()), filename)
    except ValueError as e:
        logger.error("Error reading upload %s: %s", filename, e, exc_info=True)
        return jsonify({"ok": False, "error": str(e)}), 400

    datastore.set_df(df)
    logger.info("Uploaded catalogue %s loaded into DataStore (%d records)", filename, len(df))
    return jsonify({"ok": True, "rows": len(datastore.records())})

@upload_bp.route("/reload", methods=["POST"])
def reload_catalogue():
    """Drop the cached catalogue and read it again from its configured source."""
    datastore = current_app.extensions["datastore"]
    datastore.reload()
    return jsonify({"ok": True, "rows": len(datastore.records())})

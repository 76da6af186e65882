"""HTTP routes: upload, process and one-time download."""

import logging
import mimetypes
import uuid
from pathlib import Path

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.utils import secure_filename

from promptcut.engine import process_instruction
from promptcut.instruct import InstructionClient
from promptcut.models import MediaAsset

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


def _store():
    return current_app.extensions["promptcut.store"]


def _instructions():
    client = current_app.extensions.get("promptcut.instructions")
    if client is None:
        settings = current_app.config["SETTINGS"]
        client = InstructionClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        )
        current_app.extensions["promptcut.instructions"] = client
    return client


@bp.route("/api/upload", methods=["POST"])
def upload():
    if "video" not in request.files:
        return jsonify({"error": "No video file uploaded"}), 400

    f = request.files["video"]
    if not f.filename:
        return jsonify({"error": "Empty filename"}), 400

    upload_dir = Path(current_app.config["UPLOAD_DIR"])
    upload_dir.mkdir(parents=True, exist_ok=True)

    ext = Path(secure_filename(f.filename)).suffix or ".mp4"
    filename = f"{uuid.uuid4().hex}{ext}"
    f.save(upload_dir / filename)
    logger.info("Stored upload %s as %s", f.filename, filename)

    return jsonify({"filename": filename})


@bp.route("/api/process", methods=["POST"])
async def process():
    body = request.get_json(silent=True) or {}
    prompt = body.get("prompt")
    filename = body.get("filename")

    if not isinstance(prompt, str) or not prompt.strip():
        return jsonify({"success": False, "error": "Missing 'prompt'"}), 400
    if not isinstance(filename, str) or not filename:
        return jsonify({"success": False, "error": "Missing 'filename'"}), 400
    if secure_filename(filename) != filename:
        return jsonify({"success": False, "error": "Invalid filename"}), 400

    settings = current_app.config["SETTINGS"]
    if settings.artifact_ttl_seconds > 0:
        _store().purge_expired(settings.artifact_ttl_seconds)

    input_path = Path(current_app.config["UPLOAD_DIR"]) / filename
    if not input_path.is_file():
        return jsonify({"success": False, "error": "Input file not found"}), 404

    result = await process_instruction(
        prompt, MediaAsset(input_path), _instructions(), _store()
    )
    return jsonify({
        "success": result.success,
        "statusText": result.status_text,
        "outputPaths": result.output_names,
    })


@bp.route("/api/download/<name>", methods=["GET", "HEAD"])
def download(name: str):
    mimetype = mimetypes.guess_type(name)[0] or "application/octet-stream"
    headers = {"Content-Disposition": f"attachment; filename={name}"}

    # HEAD must not claim: the stream deletes the file when closed.
    if request.method == "HEAD":
        headers["Content-Length"] = str(_store().size(name))
        return Response(mimetype=mimetype, headers=headers)

    return Response(
        _store().retrieve(name),
        mimetype=mimetype,
        headers=headers,
        direct_passthrough=True,
    )

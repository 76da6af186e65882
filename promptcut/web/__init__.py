"""Flask application factory for the PromptCut HTTP API."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from promptcut.artifacts import ArtifactStore
from promptcut.config import Settings, load_settings
from promptcut.errors import (
    ArtifactNotFoundError,
    InstructionServiceError,
    MediaProcessingError,
    PromptCutError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type, int] = {
    ArtifactNotFoundError: 404,
    MediaProcessingError: 500,
    InstructionServiceError: 502,
}


def create_app(settings: Settings | None = None, instruction_client=None) -> Flask:
    """Build the app.

    ``instruction_client`` is anything with ``async interpret(prompt) -> str``;
    when omitted an OpenAI-backed client is created on first use.
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["UPLOAD_DIR"] = settings.upload_dir
    app.config["OUTPUT_DIR"] = settings.output_dir
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_mb * 1024 * 1024
    app.config["SETTINGS"] = settings

    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    app.extensions["promptcut.store"] = ArtifactStore(settings.output_dir)
    app.extensions["promptcut.instructions"] = instruction_client

    from promptcut.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(PromptCutError)
    def handle_promptcut_error(error: PromptCutError):
        status = next(
            (code for cls, code in _STATUS_CODES.items() if isinstance(error, cls)), 422
        )
        if status >= 500:
            logger.exception("Request failed: %s", error)
        else:
            logger.warning("Request rejected (%s): %s", error.kind, error)
        return jsonify(error.to_dict()), status

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"success": False, "error": "File too large"}), 413

    return app

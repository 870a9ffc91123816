"""Flask boundary exposing the subset service over HTTP."""

from __future__ import annotations

import hashlib
import logging

from flask import Flask, Response, jsonify, request, send_from_directory

from fontslice.core.exceptions import FontSliceError, InvalidInput
from fontslice.fonts.keys import parse_codepoints
from fontslice.service import FontService


logger = logging.getLogger(__name__)

WOFF2_MIMETYPE = "application/font-woff2"
IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


def _codepoints_arg() -> list[int]:
    chars = request.args.get("char")
    if chars is None:
        raise InvalidInput("Missing 'char' parameter")
    return parse_codepoints(chars)


def create_app(service: FontService) -> Flask:
    """Build the Flask application serving ``service``."""
    app = Flask(__name__, static_folder=None)
    app.config["FONT_SERVICE"] = service

    @app.errorhandler(FontSliceError)
    def _handle_font_error(exc: FontSliceError):
        if exc.status >= 500:
            logger.error("Request failed: %s", exc, exc_info=exc)
        else:
            logger.info("Request rejected: %s", exc)
        return jsonify({"error": exc.public_message}), exc.status

    @app.after_request
    def _allow_cors(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "*"
        return response

    @app.get("/api/v1/list")
    def list_fonts():
        return jsonify([info.to_dict() for info in service.list_fonts()])

    @app.get("/api/v1/font")
    def get_font():
        font_id = request.args.get("id")
        if not font_id:
            raise InvalidInput("Missing 'id' parameter")
        codepoints = _codepoints_arg()
        data = service.get_or_generate(font_id, codepoints)

        etag = hashlib.md5(data).hexdigest()
        response = Response(data, mimetype=WOFF2_MIMETYPE)
        response.headers["Cache-Control"] = IMMUTABLE_CACHE_CONTROL
        response.set_etag(etag)
        return response.make_conditional(request)

    @app.post("/api/v1/generate")
    def generate_font():
        font_id = request.args.get("id") or None
        codepoints = _codepoints_arg()
        report = service.force_regenerate(font_id, codepoints)
        return jsonify(
            {
                "success": True,
                "message": "Font subsets regenerated",
                "font_id": font_id,
                "characters": len(codepoints),
                "written": len(report.written),
                "failed_fonts": sorted(report.failures),
            }
        )

    @app.get("/static/<path:filename>")
    def static_artifact(filename: str):
        response = send_from_directory(service.store.root, filename, mimetype=WOFF2_MIMETYPE)
        response.headers["Cache-Control"] = IMMUTABLE_CACHE_CONTROL
        return response

    return app


__all__ = ["IMMUTABLE_CACHE_CONTROL", "WOFF2_MIMETYPE", "create_app"]

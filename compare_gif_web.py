"""Web API for before/after comparison GIF generation."""

from __future__ import annotations

import argparse
import json
import logging
import os
from io import BytesIO
from typing import Any

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_file
from PIL import UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.wrappers import Response

from frame_generation import generate_comparison, validate_timing
from image_io import DEFAULT_DELAY_MS, DEFAULT_LOOP_COUNT, decode_image
from label_overlay.compositor import encode_png, render_preview
from label_overlay.errors import CompositeError, InvalidLabelConfig
from label_overlay.label_types import ImageAsset, LabelConfig
from label_overlay.layout import resolve_label_layout
from label_overlay.utils import PREVIEW_MAX_HEIGHT, PREVIEW_MAX_WIDTH

__all__ = ["configure_logging", "create_app", "create_app_from_env", "run_web_app"]

DEFAULT_MAX_UPLOAD_MB = 50


class BadRequest(Exception):
    """Request field that cannot be used; reported as HTTP 400."""


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("COMPARE_GIF_LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s [%(name)s] %(message)s",
    )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise SystemExit(f"Environment variable {name} must be an integer, got '{raw}'") from exc


def create_app(
    delay_ms: int = DEFAULT_DELAY_MS,
    loop_count: int = DEFAULT_LOOP_COUNT,
    max_upload_mb: int = DEFAULT_MAX_UPLOAD_MB,
) -> Flask:
    """Create the Flask app with the given generation defaults."""

    validate_timing(delay_ms, loop_count)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("FLASK_SECRET_KEY", "compare-gif")
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024

    def _error(message: str, status: int = 400) -> tuple[Response, int]:
        return jsonify({"error": message}), status

    def _parse_label(raw: str | None, field: str) -> LabelConfig:
        if not raw:
            raise BadRequest(f"Invalid label configuration: {field} is required")
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise BadRequest(f"Invalid label configuration: {field} is not valid JSON") from exc
        try:
            return LabelConfig.from_dict(payload)
        except InvalidLabelConfig as exc:
            raise BadRequest(f"Invalid label configuration: {exc}") from exc

    def _parse_int(raw: Any, field: str, default: int) -> int:
        if raw is None or str(raw).strip() == "":
            return default
        try:
            return int(str(raw).strip())
        except ValueError as exc:
            raise BadRequest(f"{field} must be an integer, got '{raw}'") from exc

    def _parse_number(raw: Any, field: str, default: float) -> float:
        if raw is None:
            return default
        if isinstance(raw, bool):
            raise BadRequest(f"{field} must be a number, got {raw!r}")
        try:
            return float(raw)
        except (TypeError, ValueError) as exc:
            raise BadRequest(f"{field} must be a number, got {raw!r}") from exc

    def _decode_upload(upload: FileStorage, field: str) -> ImageAsset:
        try:
            return decode_image(upload.read())
        except (UnidentifiedImageError, OSError) as exc:
            raise BadRequest(f"Could not decode {field}: {exc}") from exc

    @app.errorhandler(RequestEntityTooLarge)
    # pyright: ignore[reportUnusedFunction]
    def too_large(exc: RequestEntityTooLarge) -> tuple[Response, int]:
        return _error(f"Upload exceeds the {max_upload_mb} MB limit", 413)

    @app.route("/healthz", methods=["GET"])
    # pyright: ignore[reportUnusedFunction]
    def healthz() -> Response:
        return jsonify({"status": "ok"})

    @app.route("/api/generate", methods=["POST"])
    # pyright: ignore[reportUnusedFunction]
    def generate() -> Response | tuple[Response, int]:
        upload1 = request.files.get("image1")
        upload2 = request.files.get("image2")
        if upload1 is None or upload2 is None:
            return _error("Both images are required")

        try:
            label1 = _parse_label(request.form.get("label1"), "label1")
            label2 = _parse_label(request.form.get("label2"), "label2")
            delay = _parse_int(request.form.get("delay"), "delay", delay_ms)
            loop = _parse_int(request.form.get("loop"), "loop", loop_count)
            image1 = _decode_upload(upload1, "image1")
            image2 = _decode_upload(upload2, "image2")
        except BadRequest as exc:
            return _error(str(exc))

        try:
            gif_bytes = generate_comparison(image1, image2, label1, label2, delay, loop)
        except CompositeError as exc:
            return _error(str(exc))
        except Exception:  # pragma: no cover - encoder failure
            app.logger.exception("Error generating GIF")
            return _error("Failed to generate GIF", 500)

        return send_file(
            BytesIO(gif_bytes),
            mimetype="image/gif",
            as_attachment=True,
            download_name="comparison.gif",
        )

    @app.route("/api/preview", methods=["POST"])
    # pyright: ignore[reportUnusedFunction]
    def preview() -> Response | tuple[Response, int]:
        upload = request.files.get("image")
        if upload is None:
            return _error("An image is required")

        try:
            label = _parse_label(request.form.get("label"), "label")
            max_width = _parse_int(request.form.get("max_width"), "max_width", PREVIEW_MAX_WIDTH)
            max_height = _parse_int(request.form.get("max_height"), "max_height", PREVIEW_MAX_HEIGHT)
            if max_width <= 0 or max_height <= 0:
                raise BadRequest("Preview bounds must be positive")
            image = _decode_upload(upload, "image")
        except BadRequest as exc:
            return _error(str(exc))

        try:
            frame = render_preview(image, label, max_width, max_height)
        except CompositeError as exc:
            return _error(str(exc))
        return send_file(BytesIO(encode_png(frame)), mimetype="image/png")

    @app.route("/api/layout", methods=["POST"])
    # pyright: ignore[reportUnusedFunction]
    def layout() -> Response | tuple[Response, int]:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("Expected a JSON object")

        try:
            label = LabelConfig.from_dict(payload.get("label") or {})
            label.validate()
            width = _parse_number(payload.get("width"), "width", 0.0)
            height = _parse_number(payload.get("height"), "height", 0.0)
            scale = _parse_number(payload.get("scale"), "scale", 1.0)
            if width <= 0 or height <= 0 or scale <= 0:
                raise BadRequest("width, height and scale must be positive")
        except InvalidLabelConfig as exc:
            return _error(f"Invalid label configuration: {exc}")
        except BadRequest as exc:
            return _error(str(exc))

        result = resolve_label_layout(label, width, height, scale)
        return jsonify(
            {
                "bounds": result.bounds.to_dict(),
                "textLeft": result.text_left,
                "textTop": result.text_top,
                "degenerate": result.degenerate,
            }
        )

    return app


def create_app_from_env() -> Flask:
    """Create the Flask app using COMPARE_GIF_* environment variables."""

    load_dotenv()
    return create_app(
        delay_ms=_env_int("COMPARE_GIF_DELAY_MS", DEFAULT_DELAY_MS),
        loop_count=_env_int("COMPARE_GIF_LOOP", DEFAULT_LOOP_COUNT),
        max_upload_mb=_env_int("COMPARE_GIF_MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB),
    )


def run_web_app(host: str, port: int) -> None:
    """Launch the Flask development server."""

    app = create_app_from_env()

    use_reloader_env = os.getenv("USE_RELOADER")
    use_reloader = (
        str(use_reloader_env).lower() in {"1", "true", "yes", "on"}
        if use_reloader_env is not None
        else True
    )
    app.run(host=host, port=port, debug=False, use_reloader=use_reloader)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the web API."""

    load_dotenv()
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Before/after comparison GIF web API"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host/IP for the web API (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port for the web API (default: 3000).",
    )
    args = parser.parse_args(argv)

    run_web_app(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    main()

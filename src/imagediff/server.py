from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import RequestEntityTooLarge

from .errors import DecodeError, DimensionMismatch, InvalidOption
from .images import compare_images
from .settings import Settings, configure_logging
from .types import RGB, CompareOptions

logger = logging.getLogger(__name__)

PNG_MIMETYPE = "image/png"


def _form_fraction(name: str, default: float) -> float:
    raw = request.form.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise InvalidOption(name, raw) from None
    return min(max(value, 0.0), 1.0)


def _form_flag(name: str) -> bool:
    return request.form.get(name, "false").lower() == "true"


def _form_color(name: str, default: RGB | None) -> RGB | None:
    raw = request.form.get(name)
    if raw is None or raw == "":
        return default
    try:
        r, g, b = (int(part) for part in raw.split(","))
    except ValueError:
        raise InvalidOption(name, raw) from None
    return r, g, b


def _options_from_form() -> CompareOptions:
    return CompareOptions(
        threshold=_form_fraction("threshold", 0.1),
        include_anti_aliasing=_form_flag("includeAA"),
        output_alpha=_form_fraction("alpha", 1.0),
        anti_alias_color=_form_color("aaColor", (255, 255, 0)),
        diff_color=_form_color("diffColor", (255, 0, 0)),
        diff_color_alt=_form_color("diffColorAlt", None),
        diff_mask_only=_form_flag("diffMask"),
    )


def _uploaded_png(name: str) -> FileStorage | None:
    upload = request.files.get(name)
    if upload is None or not upload.filename:
        return None
    return upload


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(settings: Settings | None = None) -> Flask:
    if settings is None:
        settings = Settings.from_env()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e: RequestEntityTooLarge):
        return _error("Upload too large", 413)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/compare")
    def compare_uploads():
        image1 = _uploaded_png("image1")
        image2 = _uploaded_png("image2")
        if image1 is None or image2 is None:
            return _error("Both images are required", 400)
        if image1.mimetype != PNG_MIMETYPE or image2.mimetype != PNG_MIMETYPE:
            return _error("Only PNG files are allowed", 400)

        try:
            options = _options_from_form()
            result = compare_images(image1.read(), image2.read(), options)
        except (InvalidOption, DecodeError, DimensionMismatch) as e:
            logger.info(
                "Rejected comparison request",
                extra={"error": type(e).__name__, "reason": str(e)},
            )
            return _error(str(e), 400)
        except Exception:
            logger.exception("Failed to compare uploaded images")
            return _error("Failed to compare images", 500)

        return jsonify(
            {
                "mismatchedPixels": result.mismatched_pixels,
                "totalPixels": result.total_pixels,
                "differenceRatio": result.difference_ratio,
                "width": result.width,
                "height": result.height,
                "diffImage": f"data:{PNG_MIMETYPE};base64,{result.diff_png}",
            }
        )

    return app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(level=settings.log_level)
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

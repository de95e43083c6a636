"""HTTP 接口：单图上传缩放与批量缩放。"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, Response, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from image_downsizer.core.config import ServiceConfig
from image_downsizer.core.exceptions import (
    OutputDirectoryError,
    SourceNotFoundError,
    UploadFailed,
    UploadRejected,
)
from image_downsizer.processing.pipeline import process_batch
from image_downsizer.processing.upload import process_upload

LOGGER = logging.getLogger(__name__)

CONFIG_KEY = "IMAGE_DOWNSIZER"
MAX_CONTENT_LENGTH = 32 * 1024 * 1024  # 32 MB

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(config: Optional[ServiceConfig] = None) -> Flask:
    """创建 Flask 应用；未传入配置时从环境变量读取服务根目录。"""

    service_config = config or ServiceConfig.from_env()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    app.config[CONFIG_KEY] = service_config

    app.after_request(_add_cors_headers)
    app.register_error_handler(MethodNotAllowed, _method_not_allowed)
    app.register_error_handler(HTTPException, _http_error)

    app.add_url_rule("/upload_resize", "upload_resize", upload_resize, methods=["POST", "OPTIONS"])
    app.add_url_rule("/batch_resize", "batch_resize", batch_resize, methods=["POST", "OPTIONS"])
    app.add_url_rule(
        f"/{service_config.output_dirname}/<path:filename>",
        "resized_file",
        resized_file,
        methods=["GET"],
    )
    return app


def _service_config() -> ServiceConfig:
    return current_app.config[CONFIG_KEY]


def _add_cors_headers(response: Response) -> Response:
    response.headers.update(CORS_HEADERS)
    return response


def _method_not_allowed(_exc: MethodNotAllowed):
    return jsonify(error="Method not allowed"), 405


def _http_error(exc: HTTPException):
    return jsonify(error=exc.description), exc.code


def _preflight() -> Response:
    return Response(status=204)


# ── Routes ────────────────────────────────────────────────────────────────────

def upload_resize():
    if request.method == "OPTIONS":
        return _preflight()

    file = request.files.get("image")
    if file is None:
        return jsonify(error="Missing image"), 400
    if not file.filename:
        return jsonify(error="Invalid upload"), 400

    requested_name = request.form.get("filename", file.filename)
    overwrite = request.form.get("overwrite") == "1"

    try:
        result = process_upload(file.read(), requested_name, overwrite, _service_config())
    except UploadRejected as exc:
        body = {"error": str(exc)}
        if exc.mime:
            body["mime"] = exc.mime
        return jsonify(body), 400
    except (UploadFailed, OutputDirectoryError) as exc:
        LOGGER.error("上传处理失败：%s", exc)
        return jsonify(error=str(exc)), 500

    return jsonify(success=True, url=result.url)


def batch_resize():
    if request.method == "OPTIONS":
        return _preflight()

    config = _service_config()
    try:
        report = process_batch(config.source_dir, config.output_dir)
    except SourceNotFoundError as exc:
        return jsonify(error=str(exc)), 400
    except OutputDirectoryError as exc:
        LOGGER.error("批处理失败：%s", exc)
        return jsonify(error=str(exc)), 500

    return jsonify(report.to_payload())


def resized_file(filename: str):
    return send_from_directory(_service_config().output_dir, filename)

import logging
import time
from typing import Optional

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

from errors import ReceiptError
from logging_config import LOGGER_NAME, setup_logging
from models import receipt_from_json
from points import calculate_points
from store import ReceiptStore

DEFAULT_CONFIG = {
    "HOST": "0.0.0.0",
    "PORT": 5000,
    "LOG_LEVEL": "INFO",
    "LOG_REQUESTS": True,
}
SKIP_LOG_PATHS = {"/health"}

logger = logging.getLogger(LOGGER_NAME)


def create_app(config: Optional[dict] = None) -> Flask:
    """
    Builds the Flask app together with its receipt store. The store lives in
    app.extensions for as long as the app does.

    Settings come from DEFAULT_CONFIG, then FLASK_* environment variables
    (e.g. FLASK_PORT=8080), then the `config` mapping.
    """
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    setup_logging(app.config["LOG_LEVEL"])
    app.extensions["receipt_store"] = ReceiptStore()

    app.register_error_handler(ReceiptError, handle_receipt_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.before_request(start_timer)
    app.after_request(log_request)

    app.add_url_rule("/receipts/process", view_func=process_receipt, methods=["POST"])
    app.add_url_rule("/receipts/<receipt_id>/points", view_func=get_points, methods=["GET"])
    app.add_url_rule("/receipts", view_func=list_receipts, methods=["GET"])
    app.add_url_rule("/health", view_func=health, methods=["GET"])
    return app


def get_store() -> ReceiptStore:
    return current_app.extensions["receipt_store"]


def process_receipt():
    """
    Router for receipt processing requests. The input JSON is checked for the
    receipt structure only, then stored under a newly generated id which is
    returned to the user. Points are computed on the first points request.

    Returns:
        400 Error if input JSON does not have the shape of a receipt
        200 OK and generated receipt id otherwise
    """
    receipt = receipt_from_json(request.get_json(silent=True))
    receipt_id = get_store().insert(receipt)
    logger.info(
        "Receipt stored",
        extra={"extra_data": {"receipt_id": receipt_id, "items_count": len(receipt.items)}},
    )
    return jsonify({"id": receipt_id})


def get_points(receipt_id):
    """
    Router for points requests. The receipt is looked up by id and scored the
    first time it is asked for; later requests read the cached score.

    Returns:
        404 Error if the receipt id is not found
        400 Error if a stored field cannot be scored
        200 OK and the points for the receipt otherwise
    """
    points = get_store().points(receipt_id, calculate_points)
    logger.info(
        "Points returned",
        extra={"extra_data": {"receipt_id": receipt_id, "points": points}},
    )
    return jsonify({"points": points})


def list_receipts():
    """ Lists every stored receipt, with points set to null until computed """
    return jsonify([receipt.to_json() for receipt in get_store().list()])


def health():
    return jsonify({"status": "ok"})


def handle_receipt_error(error: ReceiptError):
    logger.warning(
        error.message,
        extra={"extra_data": {"error": type(error).__name__, "status": error.status_code}},
    )
    return jsonify({"error": error.message}), error.status_code


def handle_http_error(error: HTTPException):
    return jsonify({"error": f"Error: {error.description}"}), error.code


def start_timer():
    g.request_start = time.perf_counter()


def log_request(response):
    if not current_app.config["LOG_REQUESTS"] or request.path in SKIP_LOG_PATHS:
        return response
    duration_ms = round((time.perf_counter() - g.get("request_start", time.perf_counter())) * 1000)
    logger.info(
        f"{request.method} {request.path} {response.status_code}",
        extra={"extra_data": {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
        }},
    )
    return response


if __name__ == '__main__':
    flask_app = create_app()
    flask_app.run(host=flask_app.config["HOST"], port=flask_app.config["PORT"], threaded=True)
    # setting threaded=True allows Flask to concurrently handle requests

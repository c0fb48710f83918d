"""Flask application for the mock transfer endpoint."""

import logging
import random
import re
import time
import uuid
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, jsonify, request

from .config import MockServerConfig, load_config

# Server state tracking
_server_start_time: datetime | None = None
_request_count: int = 0
_config: MockServerConfig = MockServerConfig()

_YEAR_PATTERN = re.compile(r"^\d{4}$")

app = Flask(__name__)

logger = logging.getLogger("patient_transfer.mock_server")


def setup_logging(config: MockServerConfig) -> logging.Logger:
    """Configure logging for mock server with rotation.

    Args:
        config: Mock server configuration

    Returns:
        Configured logger instance
    """
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = Path(config.log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def _error(detail: str, http_status: int):
    logger.warning(f"Transfer error response {http_status}: {detail}")
    return jsonify({"detail": detail}), http_status


@app.before_request
def log_request():
    """Log all incoming requests."""
    global _request_count
    _request_count += 1
    logger.info(
        f"Request #{_request_count}: {request.method} {request.path} "
        f"(Content-Length: {request.content_length or 0})"
    )


@app.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    uptime_seconds = 0
    if _server_start_time:
        uptime_seconds = int((datetime.now(timezone.utc) - _server_start_time).total_seconds())

    return jsonify({
        "status": "healthy",
        "port": _config.http_port,
        "endpoints": ["/health", _config.transfer_endpoint],
        "uptime_seconds": uptime_seconds,
        "request_count": _request_count,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), 200


def handle_transfer():
    """Answer a transfer request according to the configured behavior."""
    behavior = _config.transfer_behavior

    if behavior.response_delay_ms:
        time.sleep(behavior.response_delay_ms / 1000)

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    phone_number = body.get("phone_number")
    year_of_birth = body.get("year_of_birth")
    if not isinstance(phone_number, str) or not phone_number:
        return _error("phone_number is required", 400)
    if not isinstance(year_of_birth, str) or not _YEAR_PATTERN.match(year_of_birth):
        return _error("year_of_birth must be a 4-digit year", 400)

    if behavior.failure_rate > 0 and random.random() < behavior.failure_rate:
        return _error(behavior.custom_fault_message or "Simulated transfer failure", 500)

    known = behavior.known_phone_numbers
    if known is not None and phone_number not in known:
        logger.info("No record matched the transfer request")
        return jsonify({"results": []}), 200

    record_id = str(uuid.uuid4())
    logger.info(f"Transfer accepted, produced record {record_id}")
    return jsonify({"results": [{"id": record_id, "year_of_birth": year_of_birth}]}), 200


@app.errorhandler(404)
def not_found(error):
    return _error("Not Found", 404)


@app.errorhandler(500)
def internal_error(error):
    return _error("Internal Server Error", 500)


def initialize_app(config: MockServerConfig, configure_logging: bool = True) -> Flask:
    """Initialize the Flask app with configuration.

    Args:
        config: Mock server configuration
        configure_logging: Attach console and rotating file handlers

    Returns:
        The initialized Flask app
    """
    global _config, _server_start_time
    _config = config
    _server_start_time = datetime.now(timezone.utc)

    if configure_logging:
        setup_logging(config)

    if "transfer" not in app.view_functions:
        app.add_url_rule(
            config.transfer_endpoint, "transfer", handle_transfer, methods=["POST"]
        )
        logger.info(f"Registered transfer endpoint: {config.transfer_endpoint}")
    else:
        logger.debug("Transfer endpoint already registered")

    return app


def run_server(
    host: str | None = None,
    port: int | None = None,
    config: MockServerConfig | None = None,
    debug: bool = False,
) -> None:
    """Run the Flask mock server.

    Args:
        host: Host address (config value if None)
        port: Port number (config value if None)
        config: Mock server configuration (loads from file if not provided)
        debug: Enable debug mode
    """
    if config is None:
        config = load_config()
    if port is not None:
        config = config.model_copy(update={"http_port": port})
    host = host or config.host

    initialize_app(config)

    logger.info(f"Starting mock transfer server on http://{host}:{config.http_port}")
    app.run(host=host, port=config.http_port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    run_server()

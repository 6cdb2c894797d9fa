"""Main Flask application."""

import json
import logging
import sys
import time

import click
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed
from werkzeug.serving import make_server

from stubapi.blueprints.posts import posts_bp
from stubapi.blueprints.users import users_bp
from stubapi.config import Config
from stubapi.models import HealthStatus
from stubapi.utils import ApiError, json_error

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Methods Flask adds on its own; not part of the declared route table.
_IMPLICIT_METHODS = frozenset({"HEAD", "OPTIONS"})


def configure_logging(level: str = "INFO") -> None:
    """Install a stream handler on the root logger unless one is present."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def _register_request_logging(app: Flask) -> None:
    """Log one line per request once the response is ready."""

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        size = response.calculate_content_length() or 0
        logger.info(
            '"%s %s %s" from %s - %d %dB in %.3fms',
            request.method,
            request.full_path.rstrip("?"),
            request.environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
            request.remote_addr,
            response.status_code,
            size,
            elapsed_ms,
        )
        return response


def _declared_methods(methods) -> list[str]:
    return sorted(set(methods) - _IMPLICIT_METHODS)


def _register_method_guard(app: Flask) -> None:
    """Answer HEAD and OPTIONS with 405 on paths that exist."""

    @app.before_request
    def _reject_implicit_methods():
        if request.method not in _IMPLICIT_METHODS:
            return None
        # Unknown paths fall through to the router's 404.
        if request.routing_exception is not None:
            return None
        adapter = app.create_url_adapter(request)
        raise MethodNotAllowed(
            valid_methods=_declared_methods(adapter.allowed_methods())
        )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return json_error(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        """Render routing errors (404, 405, ...) as JSON, keeping their headers."""
        if isinstance(error, MethodNotAllowed) and error.valid_methods:
            error.valid_methods = _declared_methods(error.valid_methods)
        response = jsonify({"error": (error.name or "error").lower()})
        response.status_code = error.code or 500
        response.headers.extend(
            (name, value)
            for name, value in error.get_headers()
            if name.lower() != "content-type"
        )
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("internal server error", 500)


def _register_health_routes(app: Flask) -> None:
    version = app.config["API_VERSION"]

    @app.route("/health", methods=["GET"])
    def health_check():
        """Liveness endpoint."""
        return jsonify(HealthStatus(status="ok", version=version).to_dict())

    @app.route("/health/ready", methods=["GET"])
    def readiness_check():
        """Readiness endpoint. There are no dependencies to wait for."""
        return jsonify(HealthStatus(status="ready", version=version).to_dict())


def route_table(app: Flask) -> list[dict[str, str]]:
    """Return the declared (method, path, endpoint) rows sorted by path."""
    rows = []
    for rule in app.url_map.iter_rules():
        if rule.endpoint == "static":
            continue
        for method in sorted((rule.methods or set()) - _IMPLICIT_METHODS):
            rows.append(
                {"method": method, "path": rule.rule, "endpoint": rule.endpoint}
            )
    return sorted(rows, key=lambda row: (row["path"], row["method"]))


def create_app(config_class: type = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Keep record field order on the wire.
    app.json.sort_keys = False

    _register_request_logging(app)
    _register_method_guard(app)
    _register_error_handlers(app)
    _register_health_routes(app)

    app.register_blueprint(users_bp)
    app.register_blueprint(posts_bp)

    @app.cli.command("route-table")
    def route_table_command():
        """Print the route table as JSON lines."""
        for row in route_table(app):
            click.echo(json.dumps(row))

    return app


def main() -> None:
    """Serve the application on HOST:PORT until interrupted."""
    app = create_app()
    host = app.config["HOST"]
    port = app.config["PORT"]

    try:
        server = make_server(host, port, app, threaded=True)
    except OSError as exc:
        logger.critical("Failed to bind %s:%s: %s", host, port, exc)
        sys.exit(1)

    logger.info("Listening on http://%s:%s", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()

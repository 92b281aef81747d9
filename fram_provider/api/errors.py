"""Error handlers for the plugin server."""
from flask import jsonify
from werkzeug.exceptions import HTTPException


def _error(summary: str, detail: str, status: int):
    return jsonify({"diagnostics": [
        {"severity": "error", "summary": summary, "detail": detail, "attribute": None},
    ]}), status


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors."""
        return _error("Bad Request", getattr(error, "description", str(error)), 400)

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        return _error("Not Found", "Resource not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error("Method Not Allowed", getattr(error, "description", str(error)), 405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error."""
        app.logger.error(f"Internal error: {error}", exc_info=True)
        return _error("Internal Server Error", "An unexpected error occurred", 500)

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        return _error("Internal Server Error", "An unexpected error occurred", 500)

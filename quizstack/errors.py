"""
Error Handling
Custom exception classes and Flask error handlers
"""
import logging

from flask import jsonify, render_template, request

logger = logging.getLogger(__name__)


class QuizStackError(Exception):
    """Base exception class for QuizStack."""

    status_code = 500

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self):
        """Convert error to dictionary for JSON response."""
        payload = {'error': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(QuizStackError):
    """Input validation failed."""
    status_code = 400


class AuthError(QuizStackError):
    """Not signed in."""
    status_code = 401


class ForbiddenError(QuizStackError):
    """Signed in but not allowed."""
    status_code = 403


class NotFoundError(QuizStackError):
    """Resource not found."""
    status_code = 404


class ConflictError(QuizStackError):
    """Resource already exists."""
    status_code = 409


def _wants_json():
    return request.path.startswith('/api/') or request.is_json


def register_error_handlers(app):
    """Attach JSON handlers for /api/ routes and HTML pages elsewhere."""

    @app.errorhandler(QuizStackError)
    def handle_quizstack_error(error):
        if error.status_code >= 500:
            logger.error('%s %s failed: %s', request.method, request.path, error.message)
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        return render_template(
            'errors/error.html',
            status_code=error.status_code,
            message=error.message,
        ), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        if _wants_json():
            return jsonify({'error': 'Not found'}), 404
        return render_template(
            'errors/error.html',
            status_code=404,
            message='The page you were looking for does not exist.',
        ), 404

    @app.errorhandler(500)
    def handle_internal_error(error):
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        if _wants_json():
            return jsonify({'message': 'Internal Server Error'}), 500
        return render_template(
            'errors/error.html',
            status_code=500,
            message='Something went wrong on our side.',
        ), 500

"""
Routes Package
Exports all route blueprints
"""
from quizstack.routes.admin import admin_bp
from quizstack.routes.api import api_bp
from quizstack.routes.auth import auth_bp
from quizstack.routes.public import public_bp

__all__ = ['admin_bp', 'api_bp', 'auth_bp', 'public_bp']

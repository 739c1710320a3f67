"""
Application Factory
Creates and configures the Flask application
"""
import logging

from flask import Flask, request

from quizstack.config import get_config
from quizstack.extensions import db, mail, socketio
from quizstack.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """
    Application factory pattern
    Creates and configures Flask app
    """
    app = Flask(__name__, template_folder='../templates', static_folder='../static')

    # Load configuration
    if config_name:
        from quizstack.config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    mail.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=app.config['SOCKETIO_CORS_ALLOWED_ORIGINS'],
        async_mode=app.config['SOCKETIO_ASYNC_MODE']
    )

    # Display times in the configured timezone
    from quizstack.utils import format_local, get_current_user
    app.jinja_env.filters['localtime'] = format_local

    # Register blueprints
    from quizstack.routes import admin_bp, api_bp, auth_bp, public_bp
    from quizstack.routes.admin import build_admin_nav

    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.context_processor
    def inject_globals():
        context = {'current_user': get_current_user()}
        if request.blueprint == 'admin':
            context['admin_nav'] = build_admin_nav(request.path)
        return context

    from quizstack.errors import register_error_handlers
    register_error_handlers(app)

    # Register Socket.IO events
    from quizstack.sockets import register_socket_events
    with app.app_context():
        register_socket_events()

    # Create database tables
    with app.app_context():
        db.create_all()
        logger.info('Database tables created/verified')

    return app

"""
Flask Extensions
Centralized extension initialization
"""
from flask_mail import Mail
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

# Initialize extensions (without app binding)
db = SQLAlchemy()
socketio = SocketIO()
mail = Mail()

# Socket.IO room that admin dashboards join
ADMIN_ROOM = 'admins'

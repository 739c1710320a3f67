"""
Helper Functions
Utility functions used across the application
"""
from datetime import datetime, timezone
from functools import wraps
from urllib.parse import urlparse

import pytz
from flask import current_app, flash, redirect, request, url_for


def now_utc():
    """Get current UTC timestamp"""
    return datetime.now(timezone.utc)


def as_utc(dt):
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_local(utc_dt):
    """Convert UTC datetime to the configured display timezone"""
    if not utc_dt:
        return None
    tz = pytz.timezone(current_app.config.get('TIMEZONE', 'UTC'))
    return as_utc(utc_dt).astimezone(tz)


def format_local(utc_dt, fmt='%d %b %Y, %I:%M %p', default='Never'):
    """Jinja filter: local time as text, ``default`` for empty values"""
    local = to_local(utc_dt)
    if local is None:
        return default
    return local.strftime(fmt)


def is_safe_next_url(target):
    """Only allow relative redirects back into this site"""
    if not target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith('/')


def get_current_user():
    """Get current logged-in user"""
    from quizstack.extensions import db
    from quizstack.models import User
    from quizstack.utils.session_state import get_store

    auth = get_store().get_state()['auth']
    if not auth.get('is_authenticated') or not auth.get('user'):
        return None
    return db.session.get(User, auth['user']['id'])


# Decorators
def require_admin(f):
    """
    Decorator to require an admin profile
    Redirects to LOGIN with ?redirected=true
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if not user or not user.is_admin:
            flash('Admin access required', 'danger')
            return redirect(url_for('auth.login', redirected='true', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def require_admin_api(f):
    """Decorator for JSON endpoints: 401 when signed out, 403 for non-admins"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from quizstack.errors import AuthError, ForbiddenError

        user = get_current_user()
        if not user:
            raise AuthError('Authentication required')
        if not user.is_admin:
            raise ForbiddenError('Admin access required')
        return f(*args, **kwargs)
    return decorated_function

"""
Utils Package
"""
from quizstack.utils.helpers import (
    now_utc,
    as_utc,
    to_local,
    format_local,
    is_safe_next_url,
    get_current_user,
    require_admin,
    require_admin_api,
)
from quizstack.utils.session_state import get_store

__all__ = [
    'now_utc',
    'as_utc',
    'to_local',
    'format_local',
    'is_safe_next_url',
    'get_current_user',
    'require_admin',
    'require_admin_api',
    'get_store',
]

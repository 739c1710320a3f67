"""
Socket.IO Event Handlers
Live admin dashboard: room membership and attempt broadcasts
"""
import logging

from flask import request
from flask_socketio import emit, join_room, leave_room

from quizstack.extensions import ADMIN_ROOM, socketio
from quizstack.services.stats_service import StatsService
from quizstack.utils import get_current_user

logger = logging.getLogger(__name__)


def register_socket_events():
    """Register all Socket.IO event handlers"""

    @socketio.on('join_admin')
    def join_admin(data=None):
        """Admin dashboard subscribes to live attempt updates"""
        user = get_current_user()
        if not user or not user.is_admin:
            logger.info('Refused admin room for socket %s', request.sid)
            return {'success': False, 'error': 'Admin access required'}

        join_room(ADMIN_ROOM)
        emit('admin_joined', {
            'email': user.email,
            'stats': StatsService.dashboard_stats(),
        })
        logger.info('%s joined the admin room', user.email)
        return {'success': True}

    @socketio.on('leave_admin')
    def leave_admin(data=None):
        leave_room(ADMIN_ROOM)
        return {'success': True}


def broadcast_attempt(attempt):
    """Push a freshly graded attempt to every admin in the room"""
    payload = {
        'quiz_id': attempt.quiz_id,
        'score': attempt.score,
        'total': attempt.total,
        'total_attempts': StatsService.attempt_count(attempt.quiz_id),
    }
    socketio.emit('attempt_recorded', payload, to=ADMIN_ROOM)
    logger.debug('Broadcast attempt on quiz %s', attempt.quiz_id)

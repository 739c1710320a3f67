"""
Sockets Package
"""
from quizstack.sockets.admin_events import broadcast_attempt, register_socket_events

__all__ = ['broadcast_attempt', 'register_socket_events']

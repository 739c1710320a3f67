"""
Services Package
"""
from quizstack.services.grading_service import GradingService
from quizstack.services.quiz_service import QuizService
from quizstack.services.quiz_sync_service import QuizSyncService
from quizstack.services.stats_service import StatsService
from quizstack.services.user_service import UserService

__all__ = ['GradingService', 'QuizService', 'QuizSyncService', 'StatsService', 'UserService']

"""
Models Package
Exports all database models
"""
from quizstack.models.user import User, Profile
from quizstack.models.quiz import Quiz
from quizstack.models.question import Question, AnswerOption
from quizstack.models.attempt import QuizAttempt
from quizstack.models.token import AuthToken

__all__ = ['User', 'Profile', 'Quiz', 'Question', 'AnswerOption', 'QuizAttempt', 'AuthToken']

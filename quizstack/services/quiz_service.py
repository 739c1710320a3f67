"""
Quiz Service
Listing, lookup, publishing and deletion of quizzes
"""
import logging

from sqlalchemy import func

from quizstack.errors import NotFoundError
from quizstack.extensions import db
from quizstack.models import Question, Quiz

logger = logging.getLogger(__name__)


class QuizService:
    """Quiz catalogue operations"""

    @staticmethod
    def list_quizzes(published_only=False, limit=None):
        """
        Quizzes newest first, each paired with its question count

        Returns:
            list: (quiz, question_count) tuples
        """
        question_count = func.count(Question.id).label('question_count')
        query = db.session.query(Quiz, question_count)\
            .outerjoin(Question, Question.quiz_id == Quiz.id)\
            .group_by(Quiz.id)\
            .order_by(Quiz.created_at.desc(), Quiz.id.desc())

        if published_only:
            query = query.filter(Quiz.is_published.is_(True))
        if limit:
            query = query.limit(limit)

        return [(quiz, int(count or 0)) for quiz, count in query.all()]

    @staticmethod
    def get_quiz(quiz_id):
        quiz = db.session.get(Quiz, quiz_id)
        if not quiz:
            raise NotFoundError('Quiz not found.')
        return quiz

    @staticmethod
    def get_public_quiz(quiz_id):
        """Published quiz or NotFoundError"""
        quiz = db.session.get(Quiz, quiz_id)
        if not quiz or not quiz.is_published:
            raise NotFoundError('Quiz not found.')
        return quiz

    @staticmethod
    def public_payload(quiz):
        """Quiz as visitors see it: option texts only, no correctness"""
        return {
            'id': quiz.id,
            'title': quiz.title,
            'description': quiz.description,
            'questions': [
                {
                    'id': question.id,
                    'text': question.text,
                    'type': question.type,
                    'options': question.public_options(),
                }
                for question in quiz.questions
            ],
        }

    @staticmethod
    def set_published(quiz_id, published):
        quiz = QuizService.get_quiz(quiz_id)
        quiz.is_published = bool(published)
        db.session.commit()
        logger.info('Quiz %s published=%s', quiz_id, quiz.is_published)
        return quiz

    @staticmethod
    def delete_quiz(quiz_id):
        """Delete quiz; questions, options and attempts cascade"""
        quiz = QuizService.get_quiz(quiz_id)
        title = quiz.title
        db.session.delete(quiz)
        db.session.commit()
        logger.info('Deleted quiz %s "%s"', quiz_id, title)
        return title

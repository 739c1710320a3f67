"""
Grading Service
Server-side scoring of submitted answers against stored correct options
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from quizstack.errors import NotFoundError, QuizStackError
from quizstack.extensions import db
from quizstack.models import Question, Quiz, QuizAttempt
from quizstack.models.question import CHOICE_TYPES, TEXT

logger = logging.getLogger(__name__)

NO_ANSWER = 'no answer'
UNSUPPORTED_TYPE = 'unsupported question type'


class GradingService:
    """Service for scoring quiz submissions"""

    @staticmethod
    def load_questions(quiz_id):
        """Questions of a published quiz in display order"""
        try:
            quiz = db.session.get(Quiz, quiz_id)
            if not quiz or not quiz.is_published:
                return []
            return Question.query.filter_by(quiz_id=quiz_id)\
                .order_by(Question.position, Question.id).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Failed to load questions for quiz %s: %s', quiz_id, exc)
            raise QuizStackError('Failed to load quiz.') from exc

    @staticmethod
    def choose_option(options, submitted):
        """
        An int picks by 0-based index, a string by option id.
        Anything else (including bools and out-of-range indexes) picks nothing.
        """
        if isinstance(submitted, bool):
            return None
        if isinstance(submitted, int):
            if 0 <= submitted < len(options):
                return options[submitted]
            return None
        if isinstance(submitted, str):
            return next((o for o in options if str(o.id) == submitted), None)
        return None

    @staticmethod
    def grade_question(question, submitted):
        """Grade one answer; returns the detail dict for the question"""
        detail = {'correct': False}
        options = list(question.options)

        if question.type in CHOICE_TYPES:
            if submitted is None:
                detail['reason'] = NO_ANSWER
                return detail
            chosen = GradingService.choose_option(options, submitted)
            if chosen is not None and chosen.is_correct:
                detail['correct'] = True

        elif question.type == TEXT:
            if not submitted or not isinstance(submitted, str):
                detail['reason'] = NO_ANSWER
                return detail
            expected = (options[0].text or '').strip().lower() if options else ''
            given = submitted.strip().lower()
            if expected and given and expected == given:
                detail['correct'] = True

        else:
            detail['reason'] = UNSUPPORTED_TYPE

        return detail

    @staticmethod
    def grade(questions, answers):
        """
        Score every question

        Returns:
            tuple: (score, detail) with detail keyed by str(question id)
        """
        score = 0
        detail = {}
        for question in questions:
            key = str(question.id)
            submitted = answers.get(key, answers.get(question.id))
            detail[key] = GradingService.grade_question(question, submitted)
            if detail[key]['correct']:
                score += 1
        return score, detail

    @staticmethod
    def persist_attempt(quiz_id, user_id, answers, score, total, detail):
        """Save the attempt; failures are logged and never raised"""
        attempt = QuizAttempt(
            quiz_id=quiz_id,
            user_id=user_id,
            answers=answers,
            score=score,
            total=total,
            detail=detail,
        )
        try:
            db.session.add(attempt)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.warning('Failed to persist quiz attempt (non-fatal): %s', exc)
            return None
        return attempt

    @classmethod
    def submit(cls, quiz_id, answers, user=None):
        """
        Grade a full submission and record the attempt

        Returns:
            dict: score, total, detail and attempt_id (None if not saved)
        """
        questions = cls.load_questions(quiz_id)
        if not questions:
            raise NotFoundError('Quiz not found or has no questions.')

        score, detail = cls.grade(questions, answers)
        total = len(questions)

        attempt = cls.persist_attempt(
            quiz_id, user.id if user else None, answers, score, total, detail
        )
        logger.info('Graded quiz %s for %s: %d/%d',
                    quiz_id, user.email if user else 'anonymous', score, total)

        if attempt is not None:
            from quizstack.sockets import broadcast_attempt
            try:
                broadcast_attempt(attempt)
            except Exception as exc:
                logger.warning('Failed to broadcast quiz attempt (non-fatal): %s', exc)

        return {
            'score': score,
            'total': total,
            'detail': detail,
            'attempt_id': attempt.id if attempt is not None else None,
        }

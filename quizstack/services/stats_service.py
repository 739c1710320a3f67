"""
Stats Service
Dashboard totals and per-quiz attempt analytics
"""
from sqlalchemy import func

from quizstack.extensions import db
from quizstack.models import Question, Quiz, QuizAttempt


def difficulty_label(correct_rate):
    if correct_rate > 70:
        return 'easy'
    if correct_rate > 40:
        return 'medium'
    return 'hard'


class StatsService:
    """Aggregates over quizzes and attempts"""

    @staticmethod
    def dashboard_stats():
        return {
            'total_quizzes': Quiz.query.count(),
            'total_questions': Question.query.count(),
            'total_attempts': QuizAttempt.query.count(),
        }

    @staticmethod
    def recent_attempts(limit=5):
        return QuizAttempt.query\
            .order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc())\
            .limit(limit).all()

    @staticmethod
    def attempt_count(quiz_id):
        return QuizAttempt.query.filter_by(quiz_id=quiz_id).count()

    @staticmethod
    def quiz_stats(quiz):
        """
        Attempt analytics for one quiz

        Returns:
            dict: attempts, average_score, average_percentage, best_score and
            a per-question list with correct/answered counts and difficulty
        """
        summary = db.session.query(
            func.count(QuizAttempt.id).label('attempts'),
            func.avg(QuizAttempt.score).label('average_score'),
            func.max(QuizAttempt.score).label('best_score'),
        ).filter(QuizAttempt.quiz_id == quiz.id).one()

        attempts = QuizAttempt.query.filter_by(quiz_id=quiz.id).all()
        total_questions = quiz.question_count

        percentages = [a.score / a.total * 100 for a in attempts if a.total]
        average_percentage = round(sum(percentages) / len(percentages)) if percentages else 0

        question_stats = []
        for number, question in enumerate(quiz.questions, 1):
            key = str(question.id)
            graded = [a.detail[key] for a in attempts if a.detail and key in a.detail]
            correct = sum(1 for d in graded if d.get('correct'))
            unanswered = sum(1 for d in graded if d.get('reason') == 'no answer')
            correct_rate = round(correct / len(graded) * 100) if graded else 0
            question_stats.append({
                'number': number,
                'question': question,
                'graded': len(graded),
                'correct': correct,
                'unanswered': unanswered,
                'correct_rate': correct_rate,
                'difficulty': difficulty_label(correct_rate) if graded else None,
            })

        return {
            'attempts': int(summary.attempts or 0),
            'average_score': round(float(summary.average_score or 0), 2),
            'average_percentage': average_percentage,
            'best_score': int(summary.best_score or 0),
            'total_questions': total_questions,
            'questions': question_stats,
        }

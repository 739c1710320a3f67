"""
QuizAttempt Model
Submitted answers with the server-computed score
"""
from quizstack.extensions import db
from quizstack.utils.helpers import now_utc


class QuizAttempt(db.Model):
    """Attempt model"""
    __tablename__ = 'quiz_attempt'

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(
        db.Integer,
        db.ForeignKey('quiz.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # NULL for anonymous visitors
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    answers = db.Column(db.JSON, nullable=False, default=dict)
    score = db.Column(db.Integer, nullable=False, default=0)
    total = db.Column(db.Integer, nullable=False, default=0)
    detail = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, index=True)

    user = db.relationship('User', lazy=True)

    def __repr__(self):
        return f'<QuizAttempt quiz={self.quiz_id} {self.score}/{self.total}>'

    @property
    def percentage(self):
        if not self.total:
            return 0
        return round(self.score / self.total * 100)

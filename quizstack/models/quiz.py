"""
Quiz Model
"""
from quizstack.extensions import db
from quizstack.utils.helpers import now_utc


class Quiz(db.Model):
    """Quiz model"""
    __tablename__ = 'quiz'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    created_by = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
    )
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc, index=True)
    is_published = db.Column(db.Boolean, nullable=False, default=True)

    # Relationships
    questions = db.relationship(
        'Question',
        backref='quiz',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='[Question.position, Question.id]',
    )
    attempts = db.relationship(
        'QuizAttempt',
        backref='quiz',
        lazy=True,
        cascade='all, delete-orphan',
    )
    author = db.relationship('User', lazy=True)

    def __repr__(self):
        return f'<Quiz {self.title}>'

    @property
    def question_count(self):
        return len(self.questions)

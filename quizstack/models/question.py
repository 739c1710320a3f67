"""
Question and AnswerOption Models
"""
from quizstack.extensions import db
from quizstack.utils.helpers import now_utc

SINGLE_CHOICE = 'single_choice'
TRUE_FALSE = 'true_false'
TEXT = 'text'

QUESTION_TYPES = (SINGLE_CHOICE, TRUE_FALSE, TEXT)
CHOICE_TYPES = (SINGLE_CHOICE, TRUE_FALSE)

QUESTION_TYPE_LABELS = {
    SINGLE_CHOICE: 'Multiple Choice',
    TRUE_FALSE: 'True / False',
    TEXT: 'Text Answer',
}


class Question(db.Model):
    """Question model"""
    __tablename__ = 'question'

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(
        db.Integer,
        db.ForeignKey('quiz.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    text = db.Column(db.Text, nullable=False)

    # single_choice, true_false, text
    type = db.Column(db.String(32), nullable=False, default=SINGLE_CHOICE)

    position = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)

    options = db.relationship(
        'AnswerOption',
        backref='question',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='[AnswerOption.position, AnswerOption.id]',
    )

    def __repr__(self):
        return f'<Question {self.id}: {self.text[:50]}>'

    @property
    def type_label(self):
        return QUESTION_TYPE_LABELS.get(self.type, self.type)

    def public_options(self):
        """Option texts only; correctness never leaves the server."""
        return [option.text for option in self.options]


class AnswerOption(db.Model):
    """Candidate answer for a question"""
    __tablename__ = 'answer_option'

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(
        db.Integer,
        db.ForeignKey('question.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    text = db.Column(db.Text, nullable=False, default='')
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)

    def __repr__(self):
        return f'<AnswerOption {self.id} correct={self.is_correct}>'

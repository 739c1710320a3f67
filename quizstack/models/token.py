"""
AuthToken Model
Single-use tokens for invitations and password resets
"""
import secrets
from datetime import timedelta

from quizstack.extensions import db
from quizstack.utils.helpers import as_utc, now_utc

PURPOSE_INVITE = 'invite'
PURPOSE_RESET = 'reset'


class AuthToken(db.Model):
    """Token model"""
    __tablename__ = 'auth_token'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    purpose = db.Column(db.String(16), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    consumed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)

    user = db.relationship('User', lazy=True)

    def __repr__(self):
        return f'<AuthToken {self.purpose} user={self.user_id}>'

    @classmethod
    def issue(cls, user, purpose, hours_valid):
        token = cls(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            purpose=purpose,
            expires_at=now_utc() + timedelta(hours=hours_valid),
        )
        db.session.add(token)
        return token

    @property
    def is_usable(self):
        if self.consumed_at is not None:
            return False
        return as_utc(self.expires_at) > now_utc()

"""
User and Profile Models
Accounts are keyed by e-mail; admin rights live on the profile record
"""
from werkzeug.security import check_password_hash, generate_password_hash

from quizstack.extensions import db
from quizstack.utils.helpers import now_utc


class User(db.Model):
    """Account model"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # NULL until the invitation is accepted
    password_hash = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=now_utc)
    invited_at = db.Column(db.DateTime(timezone=True), nullable=True)
    last_sign_in_at = db.Column(db.DateTime(timezone=True), nullable=True)

    profile = db.relationship(
        'Profile',
        backref='user',
        uselist=False,
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<User {self.email}>'

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash or not password:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return bool(self.profile and self.profile.is_admin)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'last_sign_in_at': self.last_sign_in_at.isoformat() if self.last_sign_in_at else None,
        }


class Profile(db.Model):
    """Profile model, one per user"""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)

    def __repr__(self):
        return f'<Profile {self.id} admin={self.is_admin}>'

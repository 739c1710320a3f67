"""
User Service
Sign-in, invitations, password resets and user listings
"""
import logging
import re

from flask import current_app, url_for
from flask_mail import Message
from sqlalchemy.exc import SQLAlchemyError

from quizstack.errors import AuthError, ConflictError, QuizStackError, ValidationError
from quizstack.extensions import db, mail
from quizstack.models import AuthToken, Profile, User
from quizstack.models.token import PURPOSE_INVITE, PURPOSE_RESET
from quizstack.utils.helpers import now_utc

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

INVALID_CREDENTIALS = 'Invalid login credentials'
ALREADY_REGISTERED = 'A user with this email address has already been registered'
RESET_LINK_REQUIRED = 'Please click the password reset link sent to your email.'


def normalize_email(email):
    return (email or '').strip().lower()


class UserService:
    """Account operations"""

    # ================= SIGN IN =================

    @staticmethod
    def authenticate(email, password):
        """Return the user for valid credentials, stamping last sign-in"""
        user = User.query.filter_by(email=normalize_email(email)).first()
        if not user or not user.check_password(password):
            logger.info('Failed sign-in for %s', normalize_email(email) or '<blank>')
            raise AuthError(INVALID_CREDENTIALS)

        user.last_sign_in_at = now_utc()
        db.session.commit()
        logger.info('User %s signed in', user.email)
        return user

    @staticmethod
    def build_auth_session(user):
        """Session payload stored in the auth slice"""
        return {
            'user': {
                'id': user.id,
                'email': user.email,
                'is_admin': user.is_admin,
            },
            'signed_in_at': now_utc().isoformat(),
        }

    # ================= INVITATIONS =================

    @staticmethod
    def invite_user(email, is_admin_invite=False):
        """
        Create (or re-invite) a user and e-mail the accept link

        Returns:
            User: the invited user
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError('Email is required')
        if not EMAIL_PATTERN.match(email):
            raise ValidationError('Email address is not valid')

        user = User.query.filter_by(email=email).first()
        if user and user.password_hash:
            raise ConflictError(ALREADY_REGISTERED)

        try:
            if user is None:
                user = User(email=email)
                db.session.add(user)
            user.invited_at = now_utc()

            if user.profile is None:
                user.profile = Profile(is_admin=False)
            if is_admin_invite:
                user.profile.is_admin = True

            db.session.flush()
            token = AuthToken.issue(
                user, PURPOSE_INVITE, current_app.config['INVITE_TOKEN_HOURS']
            )
            db.session.flush()

            UserService._send_invite_email(user, token)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Invite for %s failed: %s', email, exc)
            raise QuizStackError('Failed to invite user.') from exc
        except Exception as exc:
            db.session.rollback()
            logger.error('Invite e-mail to %s failed: %s', email, exc)
            raise QuizStackError(f'Failed to send invitation email: {exc}') from exc

        logger.info('Invited %s (admin=%s)', email, user.is_admin)
        return user

    @staticmethod
    def _send_invite_email(user, token):
        accept_url = url_for('auth.update_password', token=token.token, _external=True)
        hours = current_app.config['INVITE_TOKEN_HOURS']
        msg = Message(
            "You have been invited to QuizStack",
            recipients=[user.email],
            body=(
                "Hello,\n\n"
                "You have been invited to join QuizStack"
                f"{' as an administrator' if user.is_admin else ''}.\n"
                f"Set your password to accept the invitation:\n{accept_url}\n\n"
                f"This link expires in {hours // 24} days."
            ),
        )
        mail.send(msg)

    # ================= PASSWORD RESET =================

    @staticmethod
    def request_password_reset(email):
        """
        Issue a reset token and mail it if the user exists.
        Unknown addresses are ignored so callers answer identically.
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError('Email is required')

        user = User.query.filter_by(email=email).first()
        if not user:
            logger.info('Password reset requested for unknown address %s', email)
            return None

        try:
            token = AuthToken.issue(user, PURPOSE_RESET, current_app.config['RESET_TOKEN_HOURS'])
            db.session.flush()
            reset_url = url_for('auth.update_password', token=token.token, _external=True)
            msg = Message(
                "Reset your QuizStack password",
                recipients=[user.email],
                body=(
                    "We received a request to reset your password.\n"
                    f"Click the link below to set a new password:\n{reset_url}\n\n"
                    "If you did not request this, you can safely ignore this email."
                ),
            )
            mail.send(msg)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Reset token for %s failed: %s', email, exc)
            raise QuizStackError('Failed to send reset email.') from exc
        except Exception as exc:
            db.session.rollback()
            logger.error('Reset e-mail to %s failed: %s', email, exc)
            raise QuizStackError(f'Failed to send reset email: {exc}') from exc

        logger.info('Password reset link sent to %s', email)
        return token

    @staticmethod
    def get_usable_token(token_value):
        """Unconsumed, unexpired invite or reset token, or None"""
        if not token_value:
            return None
        token = AuthToken.query.filter_by(token=token_value).first()
        if not token or not token.is_usable:
            return None
        return token

    @staticmethod
    def reset_password(token_value, password, confirm):
        """Set a new password through an invite or reset token"""
        token = UserService.get_usable_token(token_value)
        if token is None:
            raise ValidationError(RESET_LINK_REQUIRED)

        min_length = current_app.config['PASSWORD_MIN_LENGTH']
        if not password or len(password) < min_length:
            raise ValidationError(f'Password must be at least {min_length} characters long.')
        if password != confirm:
            raise ValidationError('Passwords do not match.')

        user = token.user
        user.set_password(password)
        token.consumed_at = now_utc()
        db.session.commit()
        logger.info('Password updated for %s via %s token', user.email, token.purpose)
        return user

    # ================= LISTINGS =================

    @staticmethod
    def list_users():
        users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
        return [user.to_dict() for user in users]

    @staticmethod
    def list_profiles():
        """
        Every profile merged with its user's email and last sign-in

        Returns:
            list: dicts with id, email (None if unknown), last_sign_in_at, is_admin
        """
        rows = db.session.query(Profile, User)\
            .outerjoin(User, User.id == Profile.id)\
            .order_by(Profile.id).all()
        return [
            {
                'id': profile.id,
                'email': user.email if user else None,
                'last_sign_in_at': user.last_sign_in_at if user else None,
                'is_admin': profile.is_admin,
            }
            for profile, user in rows
        ]

"""
Create or promote an admin account

Usage:
    python create_admin.py admin@example.com [password]

Without a password an invitation e-mail is sent instead.
"""
import getpass
import logging
import sys

from quizstack import create_app
from quizstack.extensions import db
from quizstack.models import Profile, User
from quizstack.services import UserService
from quizstack.services.user_service import normalize_email

logger = logging.getLogger('quizstack.create_admin')


def create_admin(email, password=None):
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()

    if password is None and (user is None or not user.password_hash):
        UserService.invite_user(email, is_admin_invite=True)
        logger.info('Invitation sent to %s', email)
        return

    if user is None:
        user = User(email=email)
        db.session.add(user)
    if user.profile is None:
        user.profile = Profile(is_admin=True)
    user.profile.is_admin = True
    if password:
        user.set_password(password)
    db.session.commit()
    logger.info('Admin ready: %s', email)


def main(argv):
    if len(argv) < 2:
        print(__doc__)
        return 1

    email = argv[1]
    password = argv[2] if len(argv) > 2 else getpass.getpass('Password (blank to send an invite): ') or None

    app = create_app()
    # url_for(_external=True) in the invite mail needs a request context
    with app.test_request_context():
        create_admin(email, password)
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))

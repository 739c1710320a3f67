import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quizstack import create_app
from quizstack.extensions import db
from quizstack.models import Profile, User
from quizstack.services import QuizSyncService

PASSWORD = 'password123'


def build_draft(title='World Capitals'):
    """Three-question draft covering every question type"""
    return {
        'id': None,
        'title': title,
        'description': 'How well do you know the map?',
        'questions': [
            {
                'id': None,
                'temp_id': 1,
                'text': 'What is the capital of France?',
                'type': 'single_choice',
                'options': [
                    {'id': None, 'text': 'Berlin', 'is_correct': False},
                    {'id': None, 'text': 'Paris', 'is_correct': True},
                    {'id': None, 'text': 'Rome', 'is_correct': False},
                ],
            },
            {
                'id': None,
                'temp_id': 2,
                'text': 'The Earth is flat.',
                'type': 'true_false',
                'options': [
                    {'id': None, 'text': 'True', 'is_correct': False},
                    {'id': None, 'text': 'False', 'is_correct': True},
                ],
            },
            {
                'id': None,
                'temp_id': 3,
                'text': 'What is the capital of Japan?',
                'type': 'text',
                'options': [
                    {'id': None, 'text': 'Tokyo', 'is_correct': True},
                ],
            },
        ],
    }


def make_user(email, password=PASSWORD, is_admin=False):
    user = User(email=email)
    if password:
        user.set_password(password)
    user.profile = Profile(is_admin=is_admin)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_user(app):
    return make_user('admin@example.com', is_admin=True)


@pytest.fixture
def regular_user(app):
    return make_user('student@example.com')


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD, **params):
        return client.post('/auth/login', query_string=params,
                           data={'email': email, 'password': password})
    return _login


@pytest.fixture
def admin_client(client, admin_user, login):
    login(admin_user.email)
    return client


@pytest.fixture
def sample_quiz(app, admin_user):
    return QuizSyncService.create_quiz(build_draft(), author=admin_user)

from datetime import datetime

import pytest

from quizstack.config import TestingConfig, config, get_config
from quizstack.errors import ConflictError, NotFoundError, QuizStackError
from quizstack.services.stats_service import difficulty_label
from quizstack.utils.helpers import as_utc, format_local, is_safe_next_url


def test_format_local_uses_configured_timezone(app):
    app.config['TIMEZONE'] = 'Asia/Kolkata'
    value = datetime(2024, 1, 1, 12, 0)  # naive values are UTC

    assert format_local(value) == '01 Jan 2024, 05:30 PM'
    assert format_local(value, '%H:%M') == '17:30'


def test_format_local_empty_value(app):
    assert format_local(None) == 'Never'
    assert format_local(None, default='-') == '-'


def test_as_utc_attaches_timezone():
    assert as_utc(datetime(2024, 1, 1)).utcoffset().total_seconds() == 0
    assert as_utc(None) is None


@pytest.mark.parametrize('target, expected', [
    ('/admin/dashboard', True),
    ('/quiz/1?x=y', True),
    ('https://evil.example.com/', False),
    ('//evil.example.com', False),
    ('admin', False),
    ('', False),
    (None, False),
])
def test_is_safe_next_url(target, expected):
    assert is_safe_next_url(target) is expected


@pytest.mark.parametrize('rate, label', [(100, 'easy'), (71, 'easy'), (70, 'medium'), (41, 'medium'), (40, 'hard'), (0, 'hard')])
def test_difficulty_label(rate, label):
    assert difficulty_label(rate) == label


def test_error_payloads():
    assert NotFoundError('Quiz not found.').status_code == 404
    assert ConflictError('taken').to_dict() == {'error': 'taken'}
    error = QuizStackError('bad', status_code=418, details={'field': 'x'})
    assert error.status_code == 418
    assert error.to_dict() == {'error': 'bad', 'details': {'field': 'x'}}


def test_unknown_page_renders_html_404(client):
    response = client.get('/nowhere')

    assert response.status_code == 404
    assert b'The page you were looking for does not exist.' in response.data


def test_unknown_api_route_is_json(client):
    response = client.get('/api/nowhere')

    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_config_selection(monkeypatch):
    assert config['testing'] is TestingConfig
    monkeypatch.setenv('FLASK_ENV', 'production')
    assert get_config() is config['production']
    monkeypatch.setenv('FLASK_ENV', 'unknown')
    assert get_config() is config['default']

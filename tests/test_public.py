from quizstack.extensions import db
from quizstack.models import QuizAttempt
from quizstack.services import QuizService, QuizSyncService

from conftest import build_draft


def _take(client, quiz_id, answer=None, action='next'):
    data = {'action': action}
    if answer is not None:
        data['answer'] = answer
    return client.post(f'/quiz/{quiz_id}', data=data, follow_redirects=True)


def test_home_lists_three_latest_published_quizzes(client, sample_quiz):
    for number in range(3):
        QuizSyncService.create_quiz(build_draft(f'Quiz {number}'))
    hidden = QuizSyncService.create_quiz(build_draft('Secret'))
    QuizService.set_published(hidden.id, False)

    response = client.get('/')

    assert b'Quiz 2' in response.data
    assert b'Quiz 0' in response.data
    assert b'World Capitals' not in response.data
    assert b'Secret' not in response.data
    assert b'View All Quizzes' in response.data


def test_browse_empty_state(client, app):
    response = client.get('/quiz/browse')
    assert b'No quizzes available yet. Check back soon!' in response.data


def test_browse_lists_published_quizzes(client, sample_quiz):
    response = client.get('/quiz/browse')

    assert b'World Capitals' in response.data
    assert b'How well do you know the map?' in response.data
    assert b'3 questions' in response.data


def test_first_question_page(client, sample_quiz):
    response = client.get(f'/quiz/{sample_quiz.id}')

    assert response.status_code == 200
    assert b'Question 1 of 3' in response.data
    assert b'Paris' in response.data
    assert b'is_correct' not in response.data
    assert b'disabled>Previous' in response.data


def test_next_requires_an_answer(client, sample_quiz):
    client.get(f'/quiz/{sample_quiz.id}')
    response = _take(client, sample_quiz.id)

    assert b'Please answer this question before moving on.' in response.data
    assert b'Question 1 of 3' in response.data


def test_full_run_with_navigation(client, sample_quiz):
    quiz_id = sample_quiz.id
    client.get(f'/quiz/{quiz_id}')

    response = _take(client, quiz_id, '1')
    assert b'Question 2 of 3' in response.data

    response = _take(client, quiz_id, action='previous')
    assert b'Question 1 of 3' in response.data
    assert b'value="1" checked' in response.data

    _take(client, quiz_id, '1')
    response = _take(client, quiz_id, '1')
    assert b'Question 3 of 3' in response.data
    assert b'Finish &amp; Score' in response.data

    response = _take(client, quiz_id, 'tokyo', action='finish')

    assert b'3 / 3' in response.data
    assert b'100%' in response.data
    assert b'Congratulations!' in response.data
    attempt = QuizAttempt.query.one()
    assert attempt.score == 3
    assert attempt.user_id is None


def test_failed_run_shows_try_again(client, sample_quiz):
    quiz_id = sample_quiz.id
    client.get(f'/quiz/{quiz_id}')
    _take(client, quiz_id, '0')
    _take(client, quiz_id, '0')
    response = _take(client, quiz_id, 'Kyoto', action='finish')

    assert b'0 / 3' in response.data
    assert b'Try Again' in response.data


def test_result_requires_finished_quiz(client, sample_quiz):
    response = client.get(f'/quiz/{sample_quiz.id}/result')

    assert response.status_code == 302
    assert response.headers['Location'].endswith(f'/quiz/{sample_quiz.id}')


def test_restart_clears_progress(client, sample_quiz):
    quiz_id = sample_quiz.id
    client.get(f'/quiz/{quiz_id}')
    _take(client, quiz_id, '1')

    response = client.get(f'/quiz/{quiz_id}?restart=1')
    assert b'Question 1 of 3' in response.data


def test_unpublished_quiz_is_404(client, sample_quiz):
    sample_quiz.is_published = False
    db.session.commit()

    assert client.get(f'/quiz/{sample_quiz.id}').status_code == 404
    assert client.get('/quiz/999').status_code == 404

import pytest

from quizstack.errors import NotFoundError, ValidationError
from quizstack.extensions import db
from quizstack.models import AnswerOption, Question, Quiz
from quizstack.services import QuizService, QuizSyncService

from conftest import build_draft


def _new_question(temp_id, text, options):
    return {
        'id': None,
        'temp_id': temp_id,
        'text': text,
        'type': 'single_choice',
        'options': [
            {'id': None, 'text': option_text, 'is_correct': is_correct}
            for option_text, is_correct in options
        ],
    }


def test_create_quiz_inserts_everything_in_order(sample_quiz, admin_user):
    assert sample_quiz.created_by == admin_user.id
    assert [q.position for q in sample_quiz.questions] == [0, 1, 2]
    assert [o.text for o in sample_quiz.questions[0].options] == ['Berlin', 'Paris', 'Rome']
    assert Question.query.count() == 3
    assert AnswerOption.query.count() == 6


def test_create_quiz_rejects_invalid_draft(app):
    draft = build_draft()
    draft['title'] = '  '

    with pytest.raises(ValidationError) as excinfo:
        QuizSyncService.create_quiz(draft)

    assert excinfo.value.details['errors'] == ['Title is required.']
    assert Quiz.query.count() == 0


def test_load_draft_keeps_database_ids(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)

    assert draft['id'] == sample_quiz.id
    assert [q['id'] for q in draft['questions']] == [q.id for q in sample_quiz.questions]
    assert [q['temp_id'] for q in draft['questions']] == [1, 2, 3]
    assert draft['questions'][0]['options'][1] == {
        'id': sample_quiz.questions[0].options[1].id,
        'text': 'Paris',
        'is_correct': True,
    }


def test_load_draft_unknown_quiz(app):
    with pytest.raises(NotFoundError):
        QuizSyncService.load_draft(404)


def test_update_reconciles_deletes_and_upserts(sample_quiz):
    quiz_id = sample_quiz.id
    draft = QuizSyncService.load_draft(quiz_id)
    first, second, third = draft['questions']
    removed_question_id = second['id']

    draft['title'] = 'Capitals, revised'
    first['text'] = 'Capital of France?'
    first['options'].pop()  # Rome
    draft['questions'] = [
        first,
        third,
        _new_question(10, 'Same text?', [('A', True), ('B', False)]),
        _new_question(11, 'Same text?', [('C', False), ('D', True)]),
    ]

    summary = QuizSyncService.update_quiz(quiz_id, draft)

    assert summary == {
        'quiz_id': quiz_id,
        'questions_deleted': 1,
        'options_deleted': 1,
        'questions_created': 2,
        'questions_updated': 2,
        'options_created': 4,
        'options_updated': 3,
    }

    quiz = db.session.get(Quiz, quiz_id)
    assert quiz.title == 'Capitals, revised'
    assert db.session.get(Question, removed_question_id) is None
    assert [q.text for q in quiz.questions] == [
        'Capital of France?',
        'What is the capital of Japan?',
        'Same text?',
        'Same text?',
    ]
    assert [q.position for q in quiz.questions] == [0, 1, 2, 3]
    assert [o.text for o in quiz.questions[0].options] == ['Berlin', 'Paris']
    # new questions with identical text still get their own options
    assert [o.text for o in quiz.questions[2].options] == ['A', 'B']
    assert [o.text for o in quiz.questions[3].options] == ['C', 'D']
    assert AnswerOption.query.count() == 2 + 1 + 2 + 2


def test_update_type_change_replaces_options(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)
    question = draft['questions'][0]
    old_option_ids = {o['id'] for o in question['options']}
    question['type'] = 'true_false'
    question['options'] = [
        {'id': None, 'text': 'True', 'is_correct': True},
        {'id': None, 'text': 'False', 'is_correct': False},
    ]

    summary = QuizSyncService.update_quiz(sample_quiz.id, draft)

    assert summary['options_deleted'] == 3
    assert summary['options_created'] == 2
    assert all(db.session.get(AnswerOption, option_id) is None for option_id in old_option_ids)


def test_update_rejects_question_from_another_quiz(sample_quiz):
    other = QuizSyncService.create_quiz(build_draft('Other quiz'))
    draft = QuizSyncService.load_draft(sample_quiz.id)
    draft['questions'][0]['id'] = other.questions[0].id

    with pytest.raises(ValidationError) as excinfo:
        QuizSyncService.update_quiz(sample_quiz.id, draft)
    assert excinfo.value.message == 'Question does not belong to this quiz.'


def test_update_rejects_option_moved_between_questions(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)
    moved = draft['questions'][0]['options'].pop()
    moved['is_correct'] = False
    draft['questions'][1]['options'][0] = moved

    with pytest.raises(ValidationError) as excinfo:
        QuizSyncService.update_quiz(sample_quiz.id, draft)
    assert excinfo.value.message == 'Answer option does not belong to this question.'


def test_update_rejects_repeated_temp_id(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)
    draft['questions'].append(_new_question(99, 'New A', [('a1', True), ('a2', False)]))
    draft['questions'].append(_new_question(99, 'New B', [('b1', False), ('b2', True)]))

    with pytest.raises(ValidationError) as excinfo:
        QuizSyncService.update_quiz(sample_quiz.id, draft)

    assert excinfo.value.message == 'Each question must appear only once.'
    assert excinfo.value.details == {'duplicates': [99]}
    assert Question.query.count() == 3
    assert AnswerOption.query.count() == 6


def test_update_rejects_repeated_question_id(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)
    repeated = dict(draft['questions'][0], options=[
        {'id': None, 'text': 'Lyon', 'is_correct': False},
        {'id': None, 'text': 'Paris', 'is_correct': True},
    ])
    draft['questions'].append(repeated)

    with pytest.raises(ValidationError) as excinfo:
        QuizSyncService.update_quiz(sample_quiz.id, draft)

    assert excinfo.value.details == {'duplicates': [sample_quiz.questions[0].id]}
    assert AnswerOption.query.count() == 6


def test_create_rejects_repeated_temp_id(app):
    draft = build_draft()
    draft['questions'][1]['temp_id'] = 1

    with pytest.raises(ValidationError):
        QuizSyncService.create_quiz(draft)
    assert Quiz.query.count() == 0


def test_update_invalid_draft_changes_nothing(sample_quiz):
    draft = QuizSyncService.load_draft(sample_quiz.id)
    draft['questions'][0]['text'] = ''

    with pytest.raises(ValidationError):
        QuizSyncService.update_quiz(sample_quiz.id, draft)
    assert db.session.get(Quiz, sample_quiz.id).questions[0].text == 'What is the capital of France?'


def test_list_quizzes_newest_first_with_counts(sample_quiz):
    hidden = QuizSyncService.create_quiz(build_draft('Hidden'))
    QuizService.set_published(hidden.id, False)

    listed = QuizService.list_quizzes()
    assert [(quiz.title, count) for quiz, count in listed] == [('Hidden', 3), ('World Capitals', 3)]
    assert [quiz.title for quiz, _ in QuizService.list_quizzes(published_only=True)] == ['World Capitals']


def test_public_payload_has_no_correct_flags(sample_quiz):
    payload = QuizService.public_payload(sample_quiz)

    assert payload['questions'][0]['options'] == ['Berlin', 'Paris', 'Rome']
    assert 'is_correct' not in str(payload)


def test_delete_quiz_cascades(sample_quiz):
    assert QuizService.delete_quiz(sample_quiz.id) == 'World Capitals'
    assert Question.query.count() == 0
    assert AnswerOption.query.count() == 0

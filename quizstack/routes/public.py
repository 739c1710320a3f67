"""
Public Routes
Home page, quiz browsing, taking a quiz one question at a time, results
"""
from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from quizstack.models.question import CHOICE_TYPES
from quizstack.services import GradingService, QuizService
from quizstack.utils import get_current_user, get_store

public_bp = Blueprint('public', __name__)

ANSWER_REQUIRED = 'Please answer this question before moving on.'


def _read_answer(question):
    """Form value for the current question in the shape the grader expects"""
    raw = request.form.get('answer')
    if raw is None:
        return None
    if question.type in CHOICE_TYPES:
        try:
            return int(raw)
        except ValueError:
            return None
    return raw if raw.strip() else None


@public_bp.route('/')
def index():
    """Homepage with the latest published quizzes"""
    quizzes = QuizService.list_quizzes(
        published_only=True,
        limit=current_app.config['HOME_QUIZ_LIMIT'],
    )
    return render_template('index.html', quizzes=quizzes)


@public_bp.route('/quiz/browse')
def browse():
    quizzes = QuizService.list_quizzes(
        published_only=True,
        limit=current_app.config['BROWSE_QUIZ_LIMIT'],
    )
    return render_template('quiz/browse.html', quizzes=quizzes)


@public_bp.route('/quiz/<int:quiz_id>', methods=['GET', 'POST'])
def take_quiz(quiz_id):
    """
    One question per page. Progress (current index and answers) lives in
    the persisted quiz state; buttons post previous / next / finish.
    """
    quiz = QuizService.get_public_quiz(quiz_id)
    questions = list(quiz.questions)
    if not questions:
        flash('This quiz has no questions yet.', 'warning')
        return redirect(url_for('public.browse'))

    store = get_store()
    if request.args.get('restart') == '1':
        store.dispatch('quiz', 'reset')
    state = store.dispatch('quiz', 'start', quiz_id)
    index = min(state['current_index'], len(questions) - 1)
    question = questions[index]

    if request.method == 'POST':
        action = request.form.get('action', 'next')
        answer = _read_answer(question)
        state = store.dispatch('quiz', 'answer', question.id, answer)

        if action == 'previous':
            store.dispatch('quiz', 'goto', max(index - 1, 0))
            return redirect(url_for('public.take_quiz', quiz_id=quiz_id))

        if action == 'next':
            if answer is None:
                flash(ANSWER_REQUIRED, 'warning')
            else:
                store.dispatch('quiz', 'goto', min(index + 1, len(questions) - 1))
            return redirect(url_for('public.take_quiz', quiz_id=quiz_id))

        if action == 'finish':
            result = GradingService.submit(quiz_id, state['answers'], user=get_current_user())
            store.dispatch('quiz', 'finish', result['score'], result['total'], result['attempt_id'])
            return redirect(url_for('public.quiz_result', quiz_id=quiz_id))

        return redirect(url_for('public.take_quiz', quiz_id=quiz_id))

    return render_template(
        'quiz/take.html',
        quiz=quiz,
        question=question,
        index=index,
        total=len(questions),
        answer=state['answers'].get(str(question.id)),
        options=question.public_options(),
    )


@public_bp.route('/quiz/<int:quiz_id>/result')
def quiz_result(quiz_id):
    quiz = QuizService.get_public_quiz(quiz_id)
    state = get_store().get_state()['quiz']
    if state.get('quiz_id') != quiz_id or state.get('status') != 'finished':
        return redirect(url_for('public.take_quiz', quiz_id=quiz_id))

    score = state['score'] or 0
    total = state['total'] or 0
    percentage = round(score / total * 100) if total else 0
    return render_template(
        'quiz/result.html',
        quiz=quiz,
        score=score,
        total=total,
        percentage=percentage,
        passed=score > total / 2,
    )

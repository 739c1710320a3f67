"""
Admin Routes
Dashboard, quiz editor, quiz management, statistics and users
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from quizstack.errors import QuizStackError, ValidationError
from quizstack.models.question import QUESTION_TYPE_LABELS
from quizstack.services import QuizService, QuizSyncService, StatsService, UserService
from quizstack.services.quiz_draft import apply_action, draft_from_form, new_draft
from quizstack.utils import get_current_user, is_safe_next_url, require_admin

admin_bp = Blueprint('admin', __name__)

# (label, endpoint)
ADMIN_NAV_ITEMS = [
    ('Dashboard', 'admin.dashboard'),
    ('Create Quiz', 'admin.create_quiz'),
    ('View/Edit Quizzes', 'admin.quizzes'),
    ('Manage Users', 'admin.users'),
]


def build_admin_nav(current_path):
    """Sidebar items; the one whose href equals the current path is active"""
    items = []
    for label, endpoint in ADMIN_NAV_ITEMS:
        href = url_for(endpoint)
        items.append({'label': label, 'href': href, 'active': href == current_path})
    return items


def _draft_errors(exc):
    return exc.details.get('errors') or [exc.message]


def _render_editor(draft, errors=None, mode='create', status=200):
    return render_template(
        'admin/quiz_form.html',
        draft=draft,
        errors=errors or [],
        mode=mode,
        question_types=QUESTION_TYPE_LABELS,
    ), status


@admin_bp.route('/dashboard')
@require_admin
def dashboard():
    """Admin dashboard"""
    return render_template(
        'admin/dashboard.html',
        stats=StatsService.dashboard_stats(),
        recent_attempts=StatsService.recent_attempts(),
    )


@admin_bp.route('/users/invite', methods=['POST'])
@require_admin
def invite_user():
    """Invite form on the dashboard"""
    email = request.form.get('email', '')
    try:
        user = UserService.invite_user(email, request.form.get('is_admin') == 'on')
    except QuizStackError as exc:
        flash(exc.message, 'danger')
    else:
        flash(f'Invitation sent to {user.email}!', 'success')

    next_url = request.form.get('next')
    if is_safe_next_url(next_url):
        return redirect(next_url)
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/users')
@require_admin
def users():
    """Profiles merged with account e-mail and last sign-in"""
    return render_template('admin/users.html', profiles=UserService.list_profiles())


# ================= QUIZ MANAGEMENT =================

@admin_bp.route('/quiz')
@require_admin
def quizzes():
    """All quizzes, newest first"""
    return render_template('admin/quizzes.html', quizzes=QuizService.list_quizzes())


@admin_bp.route('/quiz/create', methods=['GET', 'POST'])
@require_admin
def create_quiz():
    """
    Quiz editor for a new quiz
    Every button posts the whole form; ``action`` picks the reducer
    """
    if request.method == 'GET':
        return _render_editor(new_draft())

    draft = draft_from_form(request.form)
    action = request.form.get('action', 'refresh')

    if action == 'save':
        try:
            quiz = QuizSyncService.create_quiz(draft, author=get_current_user())
        except ValidationError as exc:
            return _render_editor(draft, _draft_errors(exc), status=400)
        flash(f'Quiz "{quiz.title}" created successfully!', 'success')
        return redirect(url_for('admin.quizzes'))

    try:
        draft = apply_action(draft, action)
    except ValidationError as exc:
        return _render_editor(draft, [exc.message])
    return _render_editor(draft)


@admin_bp.route('/quiz/<int:quiz_id>', methods=['GET', 'POST'])
@require_admin
def edit_quiz(quiz_id):
    """Quiz editor for a stored quiz"""
    if request.method == 'GET':
        return _render_editor(QuizSyncService.load_draft(quiz_id), mode='edit')

    draft = draft_from_form(request.form)
    draft['id'] = quiz_id
    action = request.form.get('action', 'refresh')

    if action == 'save':
        try:
            QuizSyncService.update_quiz(quiz_id, draft)
        except ValidationError as exc:
            return _render_editor(draft, _draft_errors(exc), mode='edit', status=400)
        flash('Quiz updated successfully!', 'success')
        return redirect(url_for('admin.quizzes'))

    try:
        draft = apply_action(draft, action)
    except ValidationError as exc:
        return _render_editor(draft, [exc.message], mode='edit')
    return _render_editor(draft, mode='edit')


@admin_bp.route('/quiz/<int:quiz_id>/delete', methods=['POST'])
@require_admin
def delete_quiz(quiz_id):
    title = QuizService.delete_quiz(quiz_id)
    flash(f'Quiz "{title}" deleted.', 'success')
    return redirect(url_for('admin.quizzes'))


@admin_bp.route('/quiz/<int:quiz_id>/publish', methods=['POST'])
@require_admin
def toggle_publish(quiz_id):
    quiz = QuizService.get_quiz(quiz_id)
    quiz = QuizService.set_published(quiz_id, not quiz.is_published)
    state = 'published' if quiz.is_published else 'unpublished'
    flash(f'Quiz "{quiz.title}" {state}.', 'success')
    return redirect(url_for('admin.quizzes'))


@admin_bp.route('/quiz/<int:quiz_id>/stats')
@require_admin
def quiz_stats(quiz_id):
    quiz = QuizService.get_quiz(quiz_id)
    return render_template('admin/stats.html', quiz=quiz, stats=StatsService.quiz_stats(quiz))

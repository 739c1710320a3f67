"""
Authentication Routes
Handles login, logout, forgotten passwords and password updates
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from quizstack.errors import AuthError, QuizStackError, ValidationError
from quizstack.services import UserService
from quizstack.services.user_service import RESET_LINK_REQUIRED
from quizstack.utils import get_store, is_safe_next_url

auth_bp = Blueprint('auth', __name__)

RESET_LINK_SENT = 'Password reset link sent! Check your inbox.'
PASSWORD_UPDATED = 'Password updated successfully! Redirecting to login...'


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """
    Email/password login
    ?redirected=true means an admin page bounced the visitor here
    """
    next_url = request.values.get('next')
    redirected = request.args.get('redirected') == 'true'

    if request.method == 'POST':
        email = request.form.get('email', '')
        password = request.form.get('password', '')

        try:
            user = UserService.authenticate(email, password)
        except AuthError as exc:
            return render_template(
                'auth/login.html',
                error=exc.message,
                email=email,
                next_url=next_url,
                redirected=redirected,
            ), 401

        get_store().dispatch('auth', 'set_session', UserService.build_auth_session(user))
        flash('Login successful!', 'success')

        if is_safe_next_url(next_url):
            return redirect(next_url)
        if user.is_admin:
            return redirect(url_for('admin.dashboard'))
        return redirect(url_for('public.browse'))

    return render_template(
        'auth/login.html',
        email='',
        next_url=next_url,
        redirected=redirected,
    )


@auth_bp.route('/logout')
def logout():
    """User logout"""
    get_store().dispatch('auth', 'sign_out')
    flash('Logged out successfully.', 'info')
    return redirect(url_for('auth.login'))


@auth_bp.route('/forgot-password', methods=['GET', 'POST'])
def forgot_password():
    """Request a reset link by e-mail"""
    if request.method == 'POST':
        email = request.form.get('email', '')
        try:
            UserService.request_password_reset(email)
        except ValidationError as exc:
            return render_template('auth/forgot_password.html', error=exc.message, email=email), 400
        except QuizStackError as exc:
            return render_template('auth/forgot_password.html', error=exc.message, email=email), 500

        return render_template('auth/forgot_password.html', message=RESET_LINK_SENT, email='')

    return render_template('auth/forgot_password.html', email='')


@auth_bp.route('/update-password', methods=['GET', 'POST'])
def update_password():
    """
    Set a new password from an invite or reset link
    The token travels in the query string and is echoed back by the form
    """
    token = request.values.get('token', '')

    if request.method == 'POST':
        try:
            UserService.reset_password(
                token,
                request.form.get('password', ''),
                request.form.get('confirm_password', ''),
            )
        except ValidationError as exc:
            return render_template(
                'auth/update_password.html',
                token=token,
                error=exc.message,
                link_valid=UserService.get_usable_token(token) is not None,
            ), 400

        return render_template(
            'auth/update_password.html',
            token='',
            message=PASSWORD_UPDATED,
            link_valid=False,
            completed=True,
        )

    link_valid = UserService.get_usable_token(token) is not None
    return render_template(
        'auth/update_password.html',
        token=token,
        error=None if link_valid else RESET_LINK_REQUIRED,
        link_valid=link_valid,
    )

"""
API Routes
JSON endpoints: quiz submission, public quiz payloads and admin operations
"""
import logging

from flask import Blueprint, jsonify, request

from quizstack.errors import NotFoundError, QuizStackError
from quizstack.services import GradingService, QuizService, QuizSyncService, UserService
from quizstack.services.quiz_draft import draft_from_payload
from quizstack.utils import get_current_user, require_admin_api

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)

INVALID_SUBMISSION = 'Invalid payload: quizId and answers are required.'


def _quiz_id_from(value):
    """Accept ints and digit strings; anything else matches no quiz"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


@api_bp.route('/quiz/submit', methods=['POST'])
def submit_quiz():
    """
    Grade a submission server-side
    Body: {"quizId": ..., "answers": {question_id: answer}}
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not payload.get('quizId') \
            or not isinstance(payload.get('answers'), dict):
        return jsonify({'message': INVALID_SUBMISSION}), 400

    quiz_id = _quiz_id_from(payload['quizId'])
    try:
        if quiz_id is None:
            raise NotFoundError('Quiz not found or has no questions.')
        result = GradingService.submit(quiz_id, payload['answers'], user=get_current_user())
    except QuizStackError as exc:
        return jsonify({'message': exc.message}), exc.status_code
    except Exception:
        logger.exception('Quiz submission failed')
        return jsonify({'message': 'Internal Server Error'}), 500

    return jsonify({
        'score': result['score'],
        'total': result['total'],
        'detail': result['detail'],
    })


@api_bp.route('/quizzes/<int:quiz_id>')
def get_quiz(quiz_id):
    """Published quiz without correctness flags"""
    quiz = QuizService.get_public_quiz(quiz_id)
    return jsonify(QuizService.public_payload(quiz))


# ================= ADMIN =================

@api_bp.route('/admin/quizzes', methods=['POST'])
@require_admin_api
def create_quiz():
    draft = draft_from_payload(request.get_json(silent=True))
    quiz = QuizSyncService.create_quiz(draft, author=get_current_user())
    return jsonify({'success': True, 'quiz_id': quiz.id}), 201


@api_bp.route('/admin/quizzes/<int:quiz_id>', methods=['GET'])
@require_admin_api
def get_quiz_draft(quiz_id):
    return jsonify({'quiz': QuizSyncService.load_draft(quiz_id)})


@api_bp.route('/admin/quizzes/<int:quiz_id>', methods=['PUT'])
@require_admin_api
def update_quiz(quiz_id):
    draft = draft_from_payload(request.get_json(silent=True))
    summary = QuizSyncService.update_quiz(quiz_id, draft)
    return jsonify({'success': True, 'summary': summary})


@api_bp.route('/admin/invite', methods=['POST'])
@require_admin_api
def invite_user():
    """Body: {"email": ..., "isAdminInvite": bool}"""
    payload = request.get_json(silent=True) or {}
    user = UserService.invite_user(payload.get('email'), bool(payload.get('isAdminInvite')))
    return jsonify({'success': True, 'user': user.to_dict()})


@api_bp.route('/admin/users', methods=['GET'])
@require_admin_api
def list_users():
    return jsonify({'users': UserService.list_users()})

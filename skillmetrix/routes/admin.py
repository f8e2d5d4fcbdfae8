"""Admin routes - user and skill browsing, analytics, account roles."""
import logging

from flask import Blueprint, jsonify, request
from flask_babel import gettext as _

from skillmetrix.errors import NotFound, ValidationError
from skillmetrix.models import ACCOUNT_ROLES
from skillmetrix.routes.auth import admin_required, current_user
from skillmetrix.services.analytics import search_users, skill_analytics
from skillmetrix.storage import USER, SKILL, SKILL_HISTORY, PROFILE_HISTORY, get_store

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api')


@admin_bp.route('/users')
@admin_required
def users_list():
    """List all users, optionally filtered with ?q=...&field=..."""
    users = search_users(get_store().all(USER),
                         request.args.get('q'),
                         request.args.get('field', 'all'))
    return jsonify([user.to_dict() for user in users])


@admin_bp.route('/all-skills')
@admin_required
def all_skills():
    return jsonify([skill.to_dict() for skill in get_store().all(SKILL)])


@admin_bp.route('/admin/analytics')
@admin_required
def analytics():
    return jsonify(skill_analytics(get_store()))


@admin_bp.route('/admin/users/<int:user_id>/history')
@admin_required
def user_history(user_id):
    store = get_store()
    if store.get(USER, user_id) is None:
        raise NotFound(_('User not found'))
    return jsonify([entry.to_dict() for entry in store.history(PROFILE_HISTORY, 'user_id', user_id)])


@admin_bp.route('/admin/skills/<int:skill_id>/history')
@admin_required
def skill_history(skill_id):
    store = get_store()
    if store.get(SKILL, skill_id) is None:
        raise NotFound(_('Skill not found'))
    return jsonify([entry.to_dict() for entry in store.history(SKILL_HISTORY, 'skill_id', skill_id)])


@admin_bp.route('/admin/users/<int:user_id>/role', methods=['PUT'])
@admin_required
def update_user_role(user_id):
    """Change a user's account role."""
    data = request.get_json(silent=True) or {}
    new_role = data.get('accountRole') if isinstance(data, dict) else None

    # Prevent admin from demoting themselves
    if user_id == current_user().id:
        raise ValidationError(_('You cannot change your own role.'))

    if new_role not in ACCOUNT_ROLES:
        raise ValidationError(_('Invalid role.'))

    store = get_store()
    if store.get(USER, user_id) is None:
        raise NotFound(_('User not found'))

    user = store.update(USER, user_id, {'account_role': new_role})
    logger.info('Admin %s set account role of user %s to %s', current_user().id, user_id, new_role)
    return jsonify(user.to_dict())

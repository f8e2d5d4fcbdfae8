"""Profile routes - updates and change history."""
from flask import Blueprint, jsonify, request

from skillmetrix.routes.auth import current_user, login_required
from skillmetrix.services.mutations import update_profile
from skillmetrix.services.validation import parse_profile_payload
from skillmetrix.storage import PROFILE_HISTORY, get_store

profile_bp = Blueprint('profile', __name__, url_prefix='/api')


@profile_bp.route('/users/<int:user_id>/profile', methods=['PUT'])
@login_required
def update_user_profile(user_id):
    fields = parse_profile_payload(request.get_json(silent=True))
    user = update_profile(get_store(), user_id, current_user().id, fields)
    return jsonify(user.to_dict())


@profile_bp.route('/profile-history')
@login_required
def profile_history():
    history = get_store().history(PROFILE_HISTORY, 'user_id', current_user().id)
    return jsonify([entry.to_dict() for entry in history])

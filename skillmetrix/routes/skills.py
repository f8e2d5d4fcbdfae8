"""Skill routes - the owner's skills and their history."""
from flask import Blueprint, jsonify, request
from flask_babel import gettext as _

from skillmetrix.errors import Forbidden, NotFound
from skillmetrix.routes.auth import current_user, login_required
from skillmetrix.services.mutations import save_skill
from skillmetrix.services.validation import parse_skill_payload
from skillmetrix.storage import SKILL, SKILL_HISTORY, get_store

skills_bp = Blueprint('skills', __name__, url_prefix='/api')


def _get_skill_or_404(store, skill_id):
    skill = store.get(SKILL, skill_id)
    if skill is None:
        raise NotFound(_('Skill not found'))
    return skill


@skills_bp.route('/skills')
@login_required
def list_skills():
    skills = get_store().find_by(SKILL, 'user_id', current_user().id)
    return jsonify([skill.to_dict() for skill in skills])


@skills_bp.route('/skills', methods=['POST'])
@login_required
def create_skill():
    fields = parse_skill_payload(request.get_json(silent=True))
    skill = save_skill(get_store(), None, current_user().id, fields)
    return jsonify(skill.to_dict()), 201


@skills_bp.route('/skills/<int:skill_id>', methods=['PUT'])
@login_required
def update_skill(skill_id):
    fields = parse_skill_payload(request.get_json(silent=True), partial=True)
    store = get_store()
    existing = _get_skill_or_404(store, skill_id)
    skill = save_skill(store, existing, current_user().id, fields)
    return jsonify(skill.to_dict())


@skills_bp.route('/skills/<int:skill_id>/history')
@login_required
def skill_history(skill_id):
    store = get_store()
    skill = _get_skill_or_404(store, skill_id)
    if skill.user_id != current_user().id:
        raise Forbidden(_('Forbidden'))
    history = store.history(SKILL_HISTORY, 'skill_id', skill_id)
    return jsonify([entry.to_dict() for entry in history])

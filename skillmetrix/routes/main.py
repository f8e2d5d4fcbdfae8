"""Main routes - health, autocomplete suggestions, language switching."""
from flask import Blueprint, jsonify, make_response

from skillmetrix.routes.auth import login_required
from skillmetrix.services.analytics import suggestions
from skillmetrix.storage import get_store

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


@main_bp.route('/api/suggestions')
@login_required
def autocomplete_suggestions():
    return jsonify(suggestions(get_store()))


@main_bp.route('/api/set-language/<lang>', methods=['POST'])
def set_language(lang):
    if lang not in ['en', 'es']:
        lang = 'en'
    resp = make_response(jsonify({'language': lang}))
    resp.set_cookie('babel_translation', lang)
    return resp

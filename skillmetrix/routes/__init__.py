"""Routes package - Blueprint registration and JSON error responses."""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from skillmetrix.errors import SkillMetrixError
from skillmetrix.routes.main import main_bp
from skillmetrix.routes.auth import auth_bp
from skillmetrix.routes.profile import profile_bp
from skillmetrix.routes.skills import skills_bp
from skillmetrix.routes.admin import admin_bp


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(skills_bp)
    app.register_blueprint(admin_bp)


def register_error_handlers(app):

    @app.errorhandler(SkillMetrixError)
    def handle_app_error(exc):
        if exc.status_code >= 500:
            app.logger.error('%s: %s', type(exc).__name__, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        kind = (exc.name or 'error').lower().replace(' ', '_')
        return jsonify({'kind': kind, 'message': exc.description}), exc.code

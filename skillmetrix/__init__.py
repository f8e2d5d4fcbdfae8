"""
SkillMetrix - Application Factory
"""
import logging
import os

import click
from flask import Flask, request, has_request_context
from flask.logging import default_handler
from dotenv import load_dotenv

from skillmetrix.extensions import db, babel
from skillmetrix.routes import register_blueprints, register_error_handlers
from skillmetrix.storage import init_store
from config.settings import config


def get_locale():
    """Determine the best locale for the user."""
    if not has_request_context():
        return None
    lang = request.cookies.get('babel_translation')
    if lang:
        return lang
    return request.accept_languages.best_match(['en', 'es'])


def create_app(config_name=None, overrides=None):
    """Application Factory."""
    load_dotenv()

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    babel.init_app(app, locale_selector=get_locale)
    store = init_store(app)

    register_blueprints(app)
    register_error_handlers(app)

    # CLI Commands
    register_cli_commands(app)

    if app.config.get('SEED_DEMO_DATA'):
        from skillmetrix.services.seed import seed_from_config
        with app.app_context():
            if app.config['STORAGE_BACKEND'] == 'database':
                db.create_all()
            seed_from_config(app, store)

    return app


def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    app.logger.setLevel(level)
    package_logger = logging.getLogger('skillmetrix')
    package_logger.setLevel(level)
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)


def register_cli_commands(app):
    """Register CLI commands."""

    @app.cli.command("init-db")
    def init_db_command():
        """Creates database tables."""
        db.create_all()
        print("Initialized the database.")

    @app.cli.command("create-admin")
    @click.option('--email', required=True)
    @click.option('--password', required=True, prompt=True, hide_input=True)
    def create_admin_command(email, password):
        """Creates an admin account, or promotes an existing user."""
        from skillmetrix.services.seed import ensure_admin
        from skillmetrix.storage import get_store
        user = ensure_admin(get_store(), email.strip().lower(), password)
        print(f"Admin account ready: {user.email}")

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Creates the demo user with sample skills."""
        from skillmetrix.services.seed import seed_demo
        from skillmetrix.storage import get_store
        user = seed_demo(get_store())
        if user is None:
            print("Demo user already exists.")
        else:
            print(f"Created demo user {user.email}.")

"""Authentication routes and decorators."""
import logging
import secrets
import string
from functools import wraps

from flask import Blueprint, g, jsonify, request, session
from flask_babel import gettext as _
from werkzeug.security import generate_password_hash, check_password_hash

from skillmetrix.errors import EmailDeliveryError, Forbidden, Unauthorized, ValidationError
from skillmetrix.services.email import send_temporary_password_email
from skillmetrix.services.validation import (
    MIN_PASSWORD_LENGTH, parse_login_payload, parse_registration_payload,
)
from skillmetrix.storage import USER, get_store

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

TEMPORARY_PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_temporary_password(length=10):
    return ''.join(secrets.choice(TEMPORARY_PASSWORD_ALPHABET) for i in range(length))


def current_user():
    """The logged-in user, loaded once per request."""
    if 'current_user' not in g:
        user_id = session.get('user_id')
        g.current_user = get_store().get(USER, user_id) if user_id is not None else None
    return g.current_user


def login_user(user):
    session.clear()
    session.permanent = True
    session['user_id'] = user.id
    session['account_role'] = user.account_role
    g.current_user = user


# ==================== RBAC Decorators ====================

def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user() is None:
            raise Unauthorized(_('Unauthorized'))
        return f(*args, **kwargs)
    return decorated_function


def role_required(roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = current_user()
            if user is None or not user.has_role(roles):
                raise Forbidden(_('Forbidden - Admin access required'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    return role_required(['admin'])(f)


def _send_temporary_password(email, password):
    try:
        send_temporary_password_email(email, password)
    except EmailDeliveryError:
        logger.exception('Could not deliver temporary password to %s', email)


# ==================== Routes ====================

@auth_bp.route('/register', methods=['POST'])
def register():
    """Register with an email; a temporary password is mailed to it."""
    fields = parse_registration_payload(request.get_json(silent=True))
    store = get_store()

    if store.get_user_by_email(fields['email']) is not None:
        raise ValidationError(_('Email already in use'))

    temporary_password = generate_temporary_password()
    fields['password_hash'] = generate_password_hash(temporary_password)
    user = store.insert(USER, fields)
    logger.info('Registered user %s (%s)', user.id, user.email)

    _send_temporary_password(user.email, temporary_password)

    login_user(user)
    return jsonify(user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    email, password = parse_login_payload(request.get_json(silent=True))
    user = get_store().get_user_by_email(email)

    if user is None or not check_password_hash(user.password_hash, password):
        raise Unauthorized(_('Invalid email or password'))

    login_user(user)
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': _('Logged out')})


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    data = request.get_json(silent=True) or {}
    email = data.get('email') if isinstance(data, dict) else None
    if not email or not isinstance(email, str):
        raise ValidationError(_('Email is required'))

    generic = {'message': _('If your email is registered, you will receive password reset instructions')}

    store = get_store()
    user = store.get_user_by_email(email.strip().lower())
    if user is None:
        return jsonify(generic)

    temporary_password = generate_temporary_password()
    store.update(USER, user.id, {'password_hash': generate_password_hash(temporary_password)})
    logger.info('Password reset for user %s', user.id)
    _send_temporary_password(user.email, temporary_password)
    return jsonify(generic)


@auth_bp.route('/change-password', methods=['POST'])
@login_required
def change_password():
    data = request.get_json(silent=True) or {}
    current_password = data.get('currentPassword') if isinstance(data, dict) else None
    new_password = data.get('newPassword') if isinstance(data, dict) else None
    user = current_user()

    if not isinstance(current_password, str) or not check_password_hash(user.password_hash, current_password):
        raise ValidationError(_('Current password is incorrect.'))
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(_('Password must be at least %(min)d characters.', min=MIN_PASSWORD_LENGTH))

    get_store().update(USER, user.id, {'password_hash': generate_password_hash(new_password)})
    return jsonify({'message': _('Password updated')})


@auth_bp.route('/user')
def me():
    user = current_user()
    if user is None:
        raise Unauthorized(_('Unauthorized'))
    return jsonify(user.to_dict())

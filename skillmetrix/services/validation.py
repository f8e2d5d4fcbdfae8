"""Request payload validation - turns camelCase JSON into model field dicts."""
import re
from urllib.parse import urlparse

from flask_babel import gettext as _

from skillmetrix.errors import ValidationError
from skillmetrix.models import SKILL_LEVELS, Skill, User

PROFILE_KEYS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'projectName': 'project_name',
    'clientName': 'client_name',
    'role': 'role',
    'location': 'location',
}

SKILL_KEYS = {
    'userId': 'user_id',
    'name': 'name',
    'level': 'level',
    'certificationUrl': 'certification_url',
}

MIN_PASSWORD_LENGTH = 6


def is_valid_email(email):
    """Standard email regex validation."""
    regex = r'^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$'
    return re.search(regex, email or '') is not None


def is_valid_url(url):
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def column_length(model, field):
    """The declared length of a String column, None when unbounded."""
    return model.__table__.c[field].type.length


def _require_object(data):
    if not isinstance(data, dict):
        raise ValidationError(_('Request body must be a JSON object.'))
    return data


def _text(data, key, max_length, required=False):
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(_('%(field)s is required.', field=key))
        return None
    if not isinstance(value, str):
        raise ValidationError(_('%(field)s must be a string.', field=key))
    value = value.strip()
    if required and not value:
        raise ValidationError(_('%(field)s is required.', field=key))
    if max_length is not None and len(value) > max_length:
        raise ValidationError(_('%(field)s must be at most %(max)d characters.', field=key, max=max_length))
    return value or None


def parse_profile_payload(data):
    """Keys absent from the payload stay absent from the result."""
    data = _require_object(data)
    return {
        field: _text(data, key, column_length(User, field))
        for key, field in PROFILE_KEYS.items() if key in data
    }


def parse_skill_payload(data, partial=False):
    """
    Validate a skill payload.

    Creation (`partial=False`) needs userId, name and level. Updates may send
    any subset; only the keys present are returned.
    """
    data = _require_object(data)
    fields = {}

    if 'userId' in data or not partial:
        user_id = data.get('userId')
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise ValidationError(_('userId must be an integer.'))
        fields['user_id'] = user_id

    if 'name' in data or not partial:
        fields['name'] = _text(data, 'name', column_length(Skill, 'name'), required=True)

    if 'level' in data or not partial:
        level = data.get('level')
        if level not in SKILL_LEVELS:
            raise ValidationError(_('level must be one of %(levels)s.', levels=', '.join(SKILL_LEVELS)))
        fields['level'] = level

    if 'certificationUrl' in data:
        url = _text(data, 'certificationUrl', column_length(Skill, 'certification_url'))
        if url is not None and not is_valid_url(url):
            raise ValidationError(_('certificationUrl must be an http(s) URL.'))
        fields['certification_url'] = url
    elif not partial:
        fields['certification_url'] = None

    return fields


def parse_registration_payload(data):
    data = _require_object(data)
    email = _text(data, 'email', column_length(User, 'email'), required=True).lower()
    if not is_valid_email(email):
        raise ValidationError(_('Invalid email format.'))
    fields = parse_profile_payload(data)
    fields['email'] = email
    return fields


def parse_login_payload(data):
    data = _require_object(data)
    email = _text(data, 'email', column_length(User, 'email'), required=True).lower()
    if not is_valid_email(email):
        raise ValidationError(_('Invalid email format.'))
    password = data.get('password')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(_('Password must be at least %(min)d characters.', min=MIN_PASSWORD_LENGTH))
    return email, password

"""Read-only aggregates: autocomplete suggestions, admin search and charts data."""
import logging
from collections import Counter

from flask_babel import gettext as _

from skillmetrix.errors import StoreError, ValidationError
from skillmetrix.models import SKILL_LEVELS
from skillmetrix.storage import USER, SKILL

logger = logging.getLogger(__name__)

SEARCH_FIELDS = {
    'email': 'email',
    'firstName': 'first_name',
    'lastName': 'last_name',
    'role': 'role',
    'projectName': 'project_name',
    'clientName': 'client_name',
    'location': 'location',
}


def _unique(values):
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def _counts(values):
    counter = Counter(v for v in values if v)
    ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [{'name': name, 'count': count} for name, count in ranked]


def _all_or_empty(store, kind):
    try:
        return store.all(kind)
    except StoreError:
        logger.warning('Could not load %s rows for suggestions', kind, exc_info=True)
        return []


def suggestions(store):
    """Distinct values already in use, for the profile and skill autocomplete."""
    users = _all_or_empty(store, USER)
    skills = _all_or_empty(store, SKILL)
    return {
        'projects': _unique(u.project_name for u in users),
        'clients': _unique(u.client_name for u in users),
        'roles': _unique(u.role for u in users),
        'locations': _unique(u.location for u in users),
        'skills': _unique(s.name for s in skills),
    }


def search_users(users, query=None, field='all'):
    """Case-insensitive substring filter over one profile field or all of them."""
    if not query:
        return list(users)
    if field != 'all' and field not in SEARCH_FIELDS:
        raise ValidationError(_('Unknown search field: %(field)s', field=field))

    attributes = SEARCH_FIELDS.values() if field == 'all' else [SEARCH_FIELDS[field]]
    needle = query.lower()
    return [
        user for user in users
        if any(needle in (getattr(user, attr) or '').lower() for attr in attributes)
    ]


def skill_analytics(store):
    users = store.all(USER)
    skills = store.all(SKILL)
    levels = Counter(s.level for s in skills)
    return {
        'totals': {
            'users': len(users),
            'skills': len(skills),
            'certifiedSkills': sum(1 for s in skills if s.certification_url),
        },
        'skillLevels': [{'name': level, 'count': levels.get(level, 0)} for level in SKILL_LEVELS],
        'projects': _counts(u.project_name for u in users),
        'locations': _counts(u.location for u in users),
        'topSkills': _counts(s.name for s in skills)[:10],
    }

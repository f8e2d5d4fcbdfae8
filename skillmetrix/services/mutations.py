"""
Profile and skill mutations.

Each operation loads the current row, works out the history rows it needs,
writes them and then writes the entity, all inside one store unit of work.
"""
import logging

from flask_babel import gettext as _

from skillmetrix.errors import Forbidden, NotFound
from skillmetrix.services.history import (
    SKILL_FIELDS, changed_fields, profile_history_entries,
    skill_creation_entry, skill_update_entry,
)
from skillmetrix.storage import USER, SKILL, SKILL_HISTORY, PROFILE_HISTORY

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('first_name', 'last_name', 'project_name', 'client_name', 'role', 'location')


def update_profile(store, user_id, requester_id, fields):
    """
    Apply a profile update on behalf of `requester_id`.

    Only the owner may update a profile. Fields outside PROFILE_FIELDS are
    ignored. Returns the stored user, unchanged when nothing differs.
    """
    if requester_id != user_id:
        raise Forbidden(_('You can only update your own profile.'))

    fields = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}

    with store.unit_of_work(USER, user_id):
        current = store.get(USER, user_id)
        if current is None:
            raise NotFound(_('User not found.'))

        entries = profile_history_entries(current, fields)
        changes = changed_fields(current, fields)
        if not changes:
            return current

        for entry in entries:
            store.insert(PROFILE_HISTORY, entry)
        user = store.update(USER, user_id, changes)

    logger.info('User %s updated profile fields %s (%d history rows)',
                user_id, sorted(changes), len(entries))
    return user


def save_skill(store, existing, requester_id, fields):
    """
    Create a skill (`existing` is None) or update `existing`.

    Creation always records a history row. An update records one only when
    the level or certification URL changes.
    """
    if existing is None:
        return _create_skill(store, requester_id, fields)

    if existing.user_id != requester_id:
        raise Forbidden(_('You can only update your own skills.'))
    if 'user_id' in fields and fields['user_id'] != existing.user_id:
        raise Forbidden(_('A skill cannot be moved to another user.'))

    changes = {k: v for k, v in fields.items() if k in SKILL_FIELDS}

    with store.unit_of_work(SKILL, existing.id):
        current = store.get(SKILL, existing.id)
        if current is None:
            raise NotFound(_('Skill not found.'))

        entry = skill_update_entry(current, changes)
        if entry is not None:
            store.insert(SKILL_HISTORY, entry)
        skill = store.update(SKILL, current.id, changes)

    logger.info('User %s updated skill %s (history row: %s)',
                requester_id, skill.id, 'yes' if entry else 'no')
    return skill


def _create_skill(store, requester_id, fields):
    if fields.get('user_id') != requester_id:
        raise Forbidden(_('You can only add skills to your own profile.'))

    values = {k: fields.get(k) for k in SKILL_FIELDS}
    values['user_id'] = requester_id

    with store.unit_of_work():
        skill = store.insert(SKILL, values)
        store.insert(SKILL_HISTORY, skill_creation_entry(skill))

    logger.info('User %s created skill %s (%s, %s)', requester_id, skill.id, skill.name, skill.level)
    return skill

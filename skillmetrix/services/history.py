"""
Change detection for profile and skill mutations.

Functions here only decide which history rows a mutation needs and build
them as field dicts; `skillmetrix.services.mutations` persists them.

Text values are compared after normalization: surrounding whitespace is
stripped and a blank string counts as None. A field missing from the incoming
update is never treated as a change to None.
"""

# (attribute, label stored in ProfileHistory.field)
TRACKED_PROFILE_FIELDS = (
    ('role', 'Role'),
    ('project_name', 'Project Name'),
    ('client_name', 'Client Name'),
    ('location', 'Location'),
)

SKILL_FIELDS = ('name', 'level', 'certification_url')


def normalize(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def _as_text(value):
    return None if value is None else str(value)


def changed_fields(entity, fields):
    """Return the subset of `fields` whose normalized value differs from `entity`."""
    changes = {}
    for field, value in fields.items():
        value = normalize(value)
        if value != normalize(getattr(entity, field)):
            changes[field] = value
    return changes


def profile_history_entries(user, fields):
    """
    Build one ProfileHistory row per tracked field that `fields` changes.

    `previous_value` is the stored value as text (None stays None).
    `new_value` is never None; clearing a field records an empty string.
    """
    entries = []
    for field, label in TRACKED_PROFILE_FIELDS:
        if field not in fields:
            continue
        current = getattr(user, field)
        incoming = normalize(fields[field])
        if incoming == normalize(current):
            continue
        entries.append({
            'user_id': user.id,
            'field': label,
            'previous_value': _as_text(current),
            'new_value': _as_text(incoming) or '',
        })
    return entries


def skill_creation_entry(skill):
    return {
        'skill_id': skill.id,
        'user_id': skill.user_id,
        'name': skill.name,
        'level': skill.level,
        'certification_url': skill.certification_url,
    }


def skill_update_entry(skill, fields):
    """
    Return the SkillHistory row for updating `skill` with `fields`, or None.

    A row is due when the level or the certification URL changes (either one
    is enough, both together still give a single row). Name-only changes are
    not recorded. The row carries the post-update values, taking the stored
    value for anything `fields` leaves out.
    """
    level = normalize(fields['level']) if 'level' in fields else skill.level
    certification_url = (normalize(fields['certification_url'])
                         if 'certification_url' in fields else normalize(skill.certification_url))

    if level == skill.level and certification_url == normalize(skill.certification_url):
        return None

    return {
        'skill_id': skill.id,
        'user_id': skill.user_id,
        'name': normalize(fields['name']) if 'name' in fields else skill.name,
        'level': level,
        'certification_url': certification_url,
    }

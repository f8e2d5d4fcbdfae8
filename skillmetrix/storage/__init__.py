"""
Entity store - the only layer that touches durable state.

Both backends implement `EntityStore`; services receive a store instance and
never talk to SQLAlchemy directly.
"""
import abc

from flask import current_app

from skillmetrix.errors import HistoryImmutableError, StoreError
from skillmetrix.models import User, Skill, SkillHistory, ProfileHistory
from skillmetrix.utils import utcnow

USER = 'user'
SKILL = 'skill'
SKILL_HISTORY = 'skill_history'
PROFILE_HISTORY = 'profile_history'

MODELS = {
    USER: User,
    SKILL: Skill,
    SKILL_HISTORY: SkillHistory,
    PROFILE_HISTORY: ProfileHistory,
}

HISTORY_KINDS = frozenset([SKILL_HISTORY, PROFILE_HISTORY])
STAMPED_KINDS = frozenset([SKILL, SKILL_HISTORY, PROFILE_HISTORY])


def model_for(kind):
    try:
        return MODELS[kind]
    except KeyError:
        raise StoreError(f'Unknown entity kind: {kind}') from None


def column_names(kind):
    return set(model_for(kind).__table__.columns.keys())


class EntityStore(abc.ABC):
    """
    Row store for users, skills and their history.

    Subclasses provide the primitive reads and writes; this base class applies
    the rules both backends share: timestamps on insert, `updated_at` refresh
    on skill updates, and append-only history.
    """

    @abc.abstractmethod
    def get(self, kind, entity_id):
        """Return the entity with this id, or None."""

    @abc.abstractmethod
    def find_by(self, kind, field, value):
        """Return every entity whose `field` equals `value`, oldest id first."""

    @abc.abstractmethod
    def all(self, kind):
        """Return every entity of this kind, oldest id first."""

    @abc.abstractmethod
    def history(self, kind, field, value):
        """Return history rows matching `field == value`, newest first."""

    @abc.abstractmethod
    def unit_of_work(self, kind=None, entity_id=None):
        """
        Context manager grouping writes into one all-or-nothing commit.

        When `kind` and `entity_id` are given, concurrent units of work on the
        same entity run one after the other.
        """

    @abc.abstractmethod
    def _insert(self, kind, row):
        pass

    @abc.abstractmethod
    def _update(self, kind, entity_id, changes):
        pass

    def insert(self, kind, fields):
        _check_fields(kind, fields)
        row = dict(fields)
        row.pop('id', None)
        now = utcnow()
        if kind in STAMPED_KINDS:
            row['updated_at'] = now
        if kind == USER:
            row.setdefault('account_role', 'user')
            row['created_at'] = now
        return self._insert(kind, row)

    def update(self, kind, entity_id, fields):
        if kind in HISTORY_KINDS:
            raise HistoryImmutableError(f'{kind} rows cannot be updated')
        _check_fields(kind, fields)
        changes = dict(fields)
        changes.pop('id', None)
        if kind == SKILL:
            changes['updated_at'] = utcnow()
        return self._update(kind, entity_id, changes)

    def get_user_by_email(self, email):
        users = self.find_by(USER, 'email', email)
        return users[0] if users else None


def _check_fields(kind, fields):
    unknown = set(fields) - column_names(kind)
    if unknown:
        raise StoreError(f'Unknown {kind} field(s): {", ".join(sorted(unknown))}')


def create_store(backend):
    if backend == 'memory':
        from skillmetrix.storage.memory import MemoryStore
        return MemoryStore()
    if backend == 'database':
        from skillmetrix.storage.database import SQLAlchemyStore
        return SQLAlchemyStore()
    raise ValueError(f'Unknown STORAGE_BACKEND: {backend}')


def init_store(app):
    store = create_store(app.config.get('STORAGE_BACKEND', 'database'))
    app.extensions['entity_store'] = store
    return store


def get_store():
    return current_app.extensions['entity_store']

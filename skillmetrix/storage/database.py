"""Flask-SQLAlchemy backed entity store."""
import logging
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from skillmetrix.extensions import db
from skillmetrix.errors import NotFound, StoreError
from skillmetrix.storage import EntityStore, model_for

logger = logging.getLogger(__name__)


class SQLAlchemyStore(EntityStore):
    """
    Entity store on top of `db.session`.

    Outside a unit of work every write commits on its own. Inside one, writes
    are only flushed and the outermost block commits them together. The entity
    a unit of work is keyed on is re-read with SELECT ... FOR UPDATE so a
    concurrent mutation of the same row waits for the commit.

    SQLAlchemy failures on reads and writes are rolled back, logged and
    raised as StoreError.
    """

    def __init__(self):
        self._local = threading.local()

    @property
    def _depth(self):
        return getattr(self._local, 'depth', 0)

    def get(self, kind, entity_id):
        model = model_for(kind)
        with self._reading(f'get {kind} {entity_id}'):
            return db.session.get(model, entity_id)

    def find_by(self, kind, field, value):
        model = model_for(kind)
        with self._reading(f'find {kind} by {field}'):
            return model.query.filter_by(**{field: value}).order_by(model.id).all()

    def all(self, kind):
        model = model_for(kind)
        with self._reading(f'list {kind}'):
            return model.query.order_by(model.id).all()

    def history(self, kind, field, value):
        model = model_for(kind)
        with self._reading(f'list {kind} by {field}'):
            return (model.query.filter_by(**{field: value})
                    .order_by(model.updated_at.desc(), model.id.desc())
                    .all())

    def _insert(self, kind, row):
        entity = model_for(kind)(**row)
        db.session.add(entity)
        self._save(f'insert {kind}')
        return entity

    def _update(self, kind, entity_id, changes):
        entity = self.get(kind, entity_id)
        if entity is None:
            raise NotFound(f'{kind} {entity_id} not found')
        for field, value in changes.items():
            setattr(entity, field, value)
        self._save(f'update {kind} {entity_id}')
        return entity

    def _save(self, action):
        try:
            if self._depth:
                db.session.flush()
            else:
                db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Store failure during %s', action)
            raise StoreError(f'Failed to {action}') from exc

    @contextmanager
    def _reading(self, action):
        try:
            yield
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Store failure during %s', action)
            raise StoreError(f'Failed to {action}') from exc

    @contextmanager
    def unit_of_work(self, kind=None, entity_id=None):
        depth = self._depth
        self._local.depth = depth + 1
        try:
            if kind is not None and entity_id is not None:
                (model_for(kind).query.filter_by(id=entity_id)
                 .populate_existing().with_for_update().first())
            yield self
            if depth == 0:
                db.session.commit()
        except Exception as exc:
            if depth == 0:
                db.session.rollback()
            if isinstance(exc, SQLAlchemyError):
                logger.exception('Unit of work on %s %s failed', kind, entity_id)
                raise StoreError('Storage failure') from exc
            raise
        finally:
            self._local.depth = depth

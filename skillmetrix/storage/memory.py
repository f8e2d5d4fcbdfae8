"""In-memory entity store used by tests and local runs without a database."""
import threading
from contextlib import contextmanager

from skillmetrix.errors import NotFound, StoreError
from skillmetrix.storage import EntityStore, MODELS, USER, column_names, model_for


class MemoryStore(EntityStore):
    """
    Keeps rows as plain dicts and hands out detached model instances.

    A single re-entrant lock guards every table, so a unit of work holds off
    all other writers until it finishes. If the block raises, the tables are
    restored to the state they had when the outermost unit of work began.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._tables = {kind: {} for kind in MODELS}
        self._next_ids = {kind: 1 for kind in MODELS}
        self._depth = 0

    def _entity(self, kind, row):
        return model_for(kind)(**row)

    def get(self, kind, entity_id):
        model_for(kind)
        with self._lock:
            row = self._tables[kind].get(entity_id)
            if row is None:
                return None
            return self._entity(kind, row)

    def find_by(self, kind, field, value):
        model_for(kind)
        with self._lock:
            return [
                self._entity(kind, row)
                for _, row in sorted(self._tables[kind].items())
                if row.get(field) == value
            ]

    def all(self, kind):
        model_for(kind)
        with self._lock:
            return [self._entity(kind, row) for _, row in sorted(self._tables[kind].items())]

    def history(self, kind, field, value):
        rows = self.find_by(kind, field, value)
        rows.sort(key=lambda r: (r.updated_at, r.id), reverse=True)
        return rows

    def _insert(self, kind, row):
        with self._lock:
            table = self._tables[kind]
            if kind == USER and any(r['email'] == row.get('email') for r in table.values()):
                raise StoreError(f'User with email {row.get("email")} already exists')
            entity_id = self._next_ids[kind]
            self._next_ids[kind] += 1
            stored = dict.fromkeys(column_names(kind))
            stored.update(row)
            stored['id'] = entity_id
            table[entity_id] = stored
            return self._entity(kind, stored)

    def _update(self, kind, entity_id, changes):
        with self._lock:
            row = self._tables[kind].get(entity_id)
            if row is None:
                raise NotFound(f'{kind} {entity_id} not found')
            row.update(changes)
            return self._entity(kind, row)

    @contextmanager
    def unit_of_work(self, kind=None, entity_id=None):
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                saved_tables = {k: {i: dict(r) for i, r in t.items()} for k, t in self._tables.items()}
                saved_ids = dict(self._next_ids)
            self._depth += 1
            try:
                yield self
            except Exception:
                if outermost:
                    self._tables = saved_tables
                    self._next_ids = saved_ids
                raise
            finally:
                self._depth -= 1

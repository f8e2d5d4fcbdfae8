"""Entity store contract, checked against both backends."""
from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from skillmetrix.errors import HistoryImmutableError, NotFound, StoreError
from skillmetrix.extensions import db
from skillmetrix.storage import USER, SKILL, SKILL_HISTORY, PROFILE_HISTORY, create_store

from conftest import insert_user


def insert_skill(store, user_id, name='Go', level='Beginner'):
    return store.insert(SKILL, {'user_id': user_id, 'name': name, 'level': level})


class TestInsertAndRead:

    def test_insert_assigns_ids(self, store):
        first = insert_user(store, 'a@example.com')
        second = insert_user(store, 'b@example.com')
        assert first.id != second.id
        assert store.get(USER, first.id).email == 'a@example.com'

    def test_user_defaults(self, store):
        user = insert_user(store, 'a@example.com')
        fetched = store.get(USER, user.id)
        assert fetched.account_role == 'user'
        assert fetched.created_at is not None
        assert fetched.role is None

    def test_skill_insert_stamps_updated_at(self, store):
        user = insert_user(store, 'a@example.com')
        skill = insert_skill(store, user.id)
        assert store.get(SKILL, skill.id).updated_at is not None

    def test_timestamps_are_naive_utc(self, store):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        user = insert_user(store, 'a@example.com')
        skill = insert_skill(store, user.id)
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        stamped = store.get(SKILL, skill.id).updated_at
        assert stamped.tzinfo is None
        assert before <= stamped <= after
        assert before <= store.get(USER, user.id).created_at <= after

    def test_get_missing_returns_none(self, store):
        assert store.get(USER, 999) is None

    def test_find_by_foreign_key(self, store):
        alice = insert_user(store, 'a@example.com')
        bob = insert_user(store, 'b@example.com')
        insert_skill(store, alice.id, 'Go')
        insert_skill(store, bob.id, 'Rust')
        insert_skill(store, alice.id, 'SQL')
        assert [s.name for s in store.find_by(SKILL, 'user_id', alice.id)] == ['Go', 'SQL']

    def test_get_user_by_email(self, store):
        user = insert_user(store, 'a@example.com')
        assert store.get_user_by_email('a@example.com').id == user.id
        assert store.get_user_by_email('nobody@example.com') is None

    def test_duplicate_email_is_a_store_error(self, store):
        insert_user(store, 'a@example.com')
        with pytest.raises(StoreError):
            insert_user(store, 'a@example.com')

    def test_unknown_field_is_rejected(self, store):
        with pytest.raises(StoreError):
            store.insert(USER, {'email': 'a@example.com', 'password_hash': 'x', 'nickname': 'A'})

    def test_unknown_kind_is_rejected(self, store):
        with pytest.raises(StoreError):
            store.get('team', 1)


class TestUpdate:

    def test_update_applies_partial_fields(self, store):
        user = insert_user(store, 'a@example.com', location='Paris')
        store.update(USER, user.id, {'role': 'Dev'})
        fetched = store.get(USER, user.id)
        assert fetched.role == 'Dev'
        assert fetched.location == 'Paris'

    def test_update_missing_raises_not_found(self, store):
        with pytest.raises(NotFound):
            store.update(USER, 999, {'role': 'Dev'})

    def test_skill_update_refreshes_updated_at(self, store):
        user = insert_user(store, 'a@example.com')
        skill = insert_skill(store, user.id)
        before = store.get(SKILL, skill.id).updated_at
        store.update(SKILL, skill.id, {'name': 'Golang'})
        assert store.get(SKILL, skill.id).updated_at >= before

    def test_history_rows_are_immutable(self, store):
        user = insert_user(store, 'a@example.com')
        row = store.insert(PROFILE_HISTORY, {
            'user_id': user.id, 'field': 'Role', 'previous_value': None, 'new_value': 'Dev',
        })
        with pytest.raises(HistoryImmutableError):
            store.update(PROFILE_HISTORY, row.id, {'new_value': 'Lead'})
        with pytest.raises(HistoryImmutableError):
            store.update(SKILL_HISTORY, 1, {'level': 'Expert'})


class TestHistoryOrdering:

    def test_newest_first(self, store):
        user = insert_user(store, 'a@example.com')
        skill = insert_skill(store, user.id)
        ids = []
        for level in ('Beginner', 'Intermediate', 'Expert'):
            ids.append(store.insert(SKILL_HISTORY, {
                'skill_id': skill.id, 'user_id': user.id, 'name': 'Go', 'level': level,
            }).id)

        history = store.history(SKILL_HISTORY, 'skill_id', skill.id)
        assert [h.id for h in history] == list(reversed(ids))
        stamps = [h.updated_at for h in history]
        assert stamps == sorted(stamps, reverse=True)


class TestUnitOfWork:

    def test_commits_all_writes(self, store):
        user = insert_user(store, 'a@example.com')
        with store.unit_of_work(USER, user.id):
            store.insert(PROFILE_HISTORY, {
                'user_id': user.id, 'field': 'Role', 'previous_value': None, 'new_value': 'Dev',
            })
            store.update(USER, user.id, {'role': 'Dev'})
        assert store.get(USER, user.id).role == 'Dev'
        assert len(store.history(PROFILE_HISTORY, 'user_id', user.id)) == 1

    def test_rolls_back_everything_on_error(self, store):
        user = insert_user(store, 'a@example.com')
        with pytest.raises(RuntimeError):
            with store.unit_of_work(USER, user.id):
                store.insert(PROFILE_HISTORY, {
                    'user_id': user.id, 'field': 'Role', 'previous_value': None, 'new_value': 'Dev',
                })
                store.update(USER, user.id, {'role': 'Dev'})
                raise RuntimeError('boom')
        assert store.get(USER, user.id).role is None
        assert store.history(PROFILE_HISTORY, 'user_id', user.id) == []


def test_create_store_rejects_unknown_backend():
    with pytest.raises(ValueError):
        create_store('redis')


class TestDatabaseReadFailures:

    def test_read_failure_is_a_store_error(self, database_store):
        user = insert_user(database_store, 'a@example.com')
        insert_skill(database_store, user.id)
        db.session.execute(text('DROP TABLE skill_history'))
        db.session.commit()

        with pytest.raises(StoreError):
            database_store.history(SKILL_HISTORY, 'skill_id', 1)
        with pytest.raises(StoreError):
            database_store.find_by(SKILL_HISTORY, 'user_id', user.id)

        # The session was rolled back and keeps working
        assert database_store.get(USER, user.id).email == 'a@example.com'
        assert [s.name for s in database_store.all(SKILL)] == ['Go']

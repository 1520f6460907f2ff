"""Tests for the help request store and its row marshalling."""

from datetime import datetime

import pytest

from helprequest_api.app.schemas.helprequest import HelpRequestCreate, HelpRequestUpdate
from helprequest_api.app.stores.helprequest_store import (
    HelpRequestStore,
    help_request_to_row,
)


def make_create(**overrides) -> HelpRequestCreate:
    values = dict(
        requester_email="cgaucho@ucsb.edu",
        team_id="s22-5pm-3",
        table_or_breakout_room="7",
        request_time=datetime(2022, 4, 20, 17, 35),
        explanation="Need help with Swagger-ui",
        solved=False,
    )
    values.update(overrides)
    return HelpRequestCreate(**values)


@pytest.fixture
def store(connect) -> HelpRequestStore:
    return HelpRequestStore(connect)


class TestRowMarshalling:

    def test_help_request_to_row_stores_iso_time_and_integer_flag(self):
        row = help_request_to_row(make_create(solved=True))

        assert row == (
            "cgaucho@ucsb.edu",
            "s22-5pm-3",
            "7",
            "2022-04-20T17:35:00",
            "Need help with Swagger-ui",
            1,
        )


class TestHelpRequestStore:

    def test_find_all_on_empty_store(self, store):
        assert store.find_all() == []
        assert len(store.find_all()) == 0

    def test_save_without_id_assigns_increasing_ids(self, store):
        first = store.save(make_create())
        second = store.save(make_create(team_id="s22-6pm-4"))

        assert first.id >= 1
        assert second.id > first.id
        assert [r.id for r in store.find_all()] == [first.id, second.id]

    def test_save_then_find_by_id_round_trips_all_fields(self, store):
        created = store.save(make_create(solved=True))

        found = store.find_by_id(created.id)

        assert found == created
        assert found.request_time == datetime(2022, 4, 20, 17, 35)
        assert found.solved is True

    def test_find_by_id_missing_returns_none(self, store):
        assert store.find_by_id(9999) is None

    def test_save_with_id_overwrites_fields(self, store):
        created = store.save(make_create())
        replacement = HelpRequestUpdate(
            requester_email="ldelplaya@ucsb.edu",
            team_id="s22-6pm-4",
            table_or_breakout_room="13",
            request_time=datetime(2022, 4, 21, 18, 0),
            explanation="Merge conflict",
            solved=True,
        )

        updated = store.save(replacement, help_request_id=created.id)

        assert updated.id == created.id
        assert updated.requester_email == "ldelplaya@ucsb.edu"
        assert updated.solved is True
        assert store.find_by_id(created.id) == updated

    def test_save_with_unknown_id_returns_none_and_inserts_nothing(self, store):
        assert store.save(make_create(), help_request_id=9999) is None
        assert len(store.find_all()) == 0

    def test_delete_by_id(self, store):
        created = store.save(make_create())

        assert store.delete_by_id(created.id) is True
        assert store.find_by_id(created.id) is None
        assert store.delete_by_id(created.id) is False

    def test_ids_of_deleted_rows_are_not_reused(self, store):
        first = store.save(make_create())
        store.delete_by_id(first.id)

        second = store.save(make_create())

        assert second.id > first.id

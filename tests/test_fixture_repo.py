"""Tests for the JSON fixture backend."""

import json
from datetime import date

from models.property import Property, PropertySearch
from models.user import User
from repositories.fixture_repo import (
    FixturePropertyRepository,
    FixtureReservationRepository,
    FixtureTables,
    FixtureUserRepository,
)


def test_tables_load_with_integer_keys(tables):
    assert sorted(tables.users) == [1, 2, 3, 4]
    assert tables.properties[4]["city"] == "Vancouver"


def test_missing_directory_loads_empty_tables(tmp_path):
    empty = FixtureTables(tmp_path)
    assert empty.users == {} and empty.property_reviews == {}


def test_average_rating(tables):
    assert tables.average_rating(1) == 3.5
    assert tables.average_rating(2) is None


class TestFixtureUsers:

    def test_email_lookup_is_case_insensitive(self, tables):
        user = FixtureUserRepository(tables).get_by_email("MICHAELGRAY@mail.com")
        assert user.id == 4
        assert user.name == "Dale Coleman"

    def test_unknown_email(self, tables):
        assert FixtureUserRepository(tables).get_by_email("nobody@example.com") is None

    def test_get_by_id_accepts_string_ids(self, tables):
        repo = FixtureUserRepository(tables)
        assert repo.get_by_id("2").name == "Iva Harrison"
        assert repo.get_by_id(42) is None

    def test_add_assigns_next_id(self, tables):
        repo = FixtureUserRepository(tables)
        stored = repo.add(User(name="New Guest", email="new@guest.com", password="pw"))

        assert stored.id == 5
        assert repo.get_by_email("new@guest.com") == stored


class TestFixtureProperties:

    def test_default_listing_is_cheapest_first(self, tables):
        results = FixturePropertyRepository(tables).search()
        assert [p.id for p in results] == [6, 5, 3, 4, 2, 1]

    def test_limit(self, tables):
        assert len(FixturePropertyRepository(tables).search(limit=2)) == 2

    def test_city_substring(self, tables):
        results = FixturePropertyRepository(tables).search(PropertySearch(city="Vancouver"))
        assert [p.id for p in results] == [5, 4]

    def test_owner_filter(self, tables):
        results = FixturePropertyRepository(tables).search(PropertySearch(owner_id=1))
        assert [p.id for p in results] == [2, 1]

    def test_price_range_in_currency_units(self, tables):
        search = PropertySearch(minimum_price_per_night=200, maximum_price_per_night=900)
        results = FixturePropertyRepository(tables).search(search)
        assert [p.id for p in results] == [5, 3, 4, 2]

    def test_minimum_rating_skips_unreviewed(self, tables):
        results = FixturePropertyRepository(tables).search(PropertySearch(minimum_rating=4))
        assert [p.id for p in results] == [5, 3, 4]
        assert all(p.average_rating >= 4 for p in results)

    def test_add_property(self, tables, property_input):
        repo = FixturePropertyRepository(tables)
        stored = repo.add(Property.from_input(property_input))

        assert stored.id == 7
        assert stored.average_rating is None
        assert [p.id for p in repo.search(PropertySearch(city="Kelowna"))] == [7]


class TestFixtureReservations:

    def test_past_reservations_ordered_by_start(self, tables):
        rows = FixtureReservationRepository(tables).get_past_for_guest(2)

        assert [r["reservation_id"] for r in rows] == [4, 1, 2]
        assert [r["id"] for r in rows] == [3, 1, 4]
        assert rows[0]["start_date"] == date(2014, 10, 21)
        assert rows[1]["average_rating"] == 3.5

    def test_future_reservations_are_excluded(self, tables):
        rows = FixtureReservationRepository(tables).get_past_for_guest(2, limit=10)
        assert 6 not in [r["reservation_id"] for r in rows]

    def test_limit(self, tables):
        rows = FixtureReservationRepository(tables).get_past_for_guest(3, limit=1)
        assert [r["title"] for r in rows] == ["Fun glad"]

    def test_guest_without_reservations(self, tables):
        assert FixtureReservationRepository(tables).get_past_for_guest(1) == []


def _write_users(directory, users):
    (directory / "users.json").write_text(
        json.dumps({str(u["id"]): u for u in users}), encoding="utf-8"
    )


def test_insert_after_id_gap_keeps_existing_rows(tmp_path):
    _write_users(tmp_path, [
        {"id": 1, "name": "a", "email": "a@x", "password": "p"},
        {"id": 3, "name": "c", "email": "c@x", "password": "p"},
    ])
    repo = FixtureUserRepository(FixtureTables(tmp_path))

    stored = repo.add(User(name="new", email="new@x", password="p"))

    assert stored.id == 4
    assert repo.get_by_email("c@x").id == 3
    assert repo.get_by_id(3).name == "c"


def test_null_rows_do_not_cause_id_reuse(tmp_path):
    (tmp_path / "users.json").write_text(
        json.dumps({"1": None, "2": {"id": 2, "name": "b", "email": "b@x", "password": "p"}}),
        encoding="utf-8",
    )
    repo = FixtureUserRepository(FixtureTables(tmp_path))

    assert repo.add(User(name="new", email="new@x", password="p")).id == 3
    assert repo.get_by_id(2).name == "b"


def test_duplicate_email_returns_last_row(tmp_path):
    _write_users(tmp_path, [
        {"id": 1, "name": "first", "email": "dup@x", "password": "p"},
        {"id": 2, "name": "second", "email": "DUP@x", "password": "p"},
    ])
    user = FixtureUserRepository(FixtureTables(tmp_path)).get_by_email("dup@X")
    assert user.name == "second"


def test_rows_returns_a_snapshot(tables):
    snapshot = tables.rows("users")
    tables.insert("users", {"name": "n", "email": "n@x", "password": "p"})

    assert len(snapshot) == 4
    assert len(tables.rows("users")) == 5

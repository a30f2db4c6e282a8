"""Tests for the filter predicate builder."""
from datetime import datetime, timedelta, timezone

import pytest

from auditlog.errors import InvalidInput
from auditlog.services import MATCH_ALL, LogFilters, build_predicate, query_logs
from auditlog.services.filters import (
    ActionEquals, CreatedFrom, CreatedUntil, ProductMatches, UserMatches, parse_bound,
)


def _matching_ids(db, filters):
    page = query_logs(db, build_predicate(filters), limit=100)
    return sorted(entry.id for entry in page.items)


class TestParseBound:
    def test_blank_is_absent(self):
        assert parse_bound(None, "startDate") is None
        assert parse_bound("", "startDate") is None
        assert parse_bound("   ", "startDate") is None

    def test_date_only_start_is_midnight_utc(self):
        assert parse_bound("2024-05-01", "startDate") == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_date_only_end_covers_whole_day(self):
        bound = parse_bound("2024-05-01", "endDate", end_of_day=True)
        assert bound == datetime(2024, 5, 1, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        assert parse_bound("2024-05-01T10:30:00", "startDate") == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)

    def test_offset_is_converted_to_utc(self):
        bound = parse_bound("2024-05-01T10:30:00-03:00", "startDate")
        assert bound == datetime(2024, 5, 1, 13, 30, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        assert parse_bound("2024-05-01T10:30:00Z", "startDate") == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "01/05/2024"])
    def test_garbage_raises_invalid_input(self, value):
        with pytest.raises(InvalidInput):
            parse_bound(value, "startDate")


class TestBuildPredicate:
    def test_no_filters_matches_all(self):
        assert build_predicate(None) is MATCH_ALL
        assert build_predicate(LogFilters()).clauses == ()

    def test_blank_params_produce_no_clauses(self):
        filters = LogFilters.from_params(action="", user="", product="", start_date="", end_date="")
        assert build_predicate(filters).clauses == ()

    def test_clause_per_filter(self):
        filters = LogFilters.from_params(
            action="PRODUCT_CREATE", user="maria", product="PRD",
            start_date="2024-05-01", end_date="2024-05-31",
        )
        clauses = build_predicate(filters).clauses

        assert clauses == (
            ActionEquals("PRODUCT_CREATE"),
            UserMatches("maria"),
            ProductMatches("PRD"),
            CreatedFrom(datetime(2024, 5, 1, tzinfo=timezone.utc)),
            CreatedUntil(datetime(2024, 5, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)),
        )

    def test_predicate_is_immutable(self):
        predicate = build_predicate(LogFilters(action="USER_LOGIN"))
        with pytest.raises(AttributeError):
            predicate.clauses = ()


class TestFilterMatching:
    def test_action_is_exact(self, db, make_entry):
        created = make_entry(action="PRODUCT_CREATE")
        make_entry(action="PRODUCT_CREATE_DRAFT")
        make_entry(action="product_create")

        assert _matching_ids(db, LogFilters(action="PRODUCT_CREATE")) == [created.id]

    def test_user_email_substring_case_insensitive(self, db, make_entry):
        alice = make_entry(user_email="Alice@Example.com")
        bob = make_entry(user_email="bob@example.com")
        make_entry()

        assert _matching_ids(db, LogFilters(user="alice")) == [alice.id]
        assert _matching_ids(db, LogFilters(user="EXAMPLE.COM")) == [alice.id, bob.id]

    def test_user_id_exact_text_match(self, db, make_entry):
        four = make_entry(user_id=4, user_email="maria@atlas.local")
        make_entry(user_id=42, user_email="joao@atlas.local")
        make_entry(user_id=14, user_email="carla@atlas.local")

        assert _matching_ids(db, LogFilters(user="4")) == [four.id]

    def test_product_matches_name_or_code(self, db, make_entry):
        by_name = make_entry(product_code="PRD-0001", product_name="Parafuso Sextavado")
        by_code = make_entry(product_code="PAR-77", product_name="Porca")
        make_entry(product_code="PRD-0003", product_name="Arruela")

        assert _matching_ids(db, LogFilters(product="par")) == [by_name.id, by_code.id]

    def test_wildcards_are_literal(self, db, make_entry):
        percent = make_entry(product_name="Desconto 10% off")
        make_entry(product_name="Desconto 100 off")

        assert _matching_ids(db, LogFilters(product="10%")) == [percent.id]
        assert _matching_ids(db, LogFilters(product="_")) == []

    def test_date_bounds_are_inclusive(self, db, make_entry):
        t = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
        before = make_entry(created_at=t - timedelta(seconds=1))
        at = make_entry(created_at=t)
        after = make_entry(created_at=t + timedelta(seconds=1))

        assert _matching_ids(db, LogFilters(start_date=t, end_date=t)) == [at.id]
        assert _matching_ids(db, LogFilters(start_date=t)) == [at.id, after.id]
        assert _matching_ids(db, LogFilters(end_date=t)) == [before.id, at.id]

    def test_date_only_end_includes_the_day(self, db, make_entry):
        evening = make_entry(created_at=datetime(2024, 5, 1, 18, 30, tzinfo=timezone.utc))
        make_entry(created_at=datetime(2024, 5, 2, 0, 0, 1, tzinfo=timezone.utc))

        filters = LogFilters.from_params(start_date="2024-05-01", end_date="2024-05-01")
        assert _matching_ids(db, filters) == [evening.id]

    def test_inverted_range_matches_nothing(self, db, make_entry):
        make_entry(created_at=datetime(2024, 5, 1, 12, tzinfo=timezone.utc))

        filters = LogFilters.from_params(start_date="2024-05-02", end_date="2024-04-30")
        assert _matching_ids(db, filters) == []

    def test_filters_are_combined(self, db, make_entry):
        match = make_entry(action="PRODUCT_UPDATE", user_email="maria@atlas.local", product_code="PRD-0001")
        make_entry(action="PRODUCT_UPDATE", user_email="joao@atlas.local", product_code="PRD-0001")
        make_entry(action="PRODUCT_DELETE", user_email="maria@atlas.local", product_code="PRD-0001")
        make_entry(action="PRODUCT_UPDATE", user_email="maria@atlas.local", product_code="PRD-0002")

        filters = LogFilters(action="PRODUCT_UPDATE", user="maria", product="0001")
        assert _matching_ids(db, filters) == [match.id]

    def test_entries_without_actor_do_not_match_user_filter(self, db, make_entry):
        make_entry(action="CSV_EXPORT")

        assert _matching_ids(db, LogFilters(user="admin")) == []

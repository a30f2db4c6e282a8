"""Tests for the sample data seeder."""
from auditlog.models import LogEntry
from auditlog.seed.seed_data import SEED_ENTRIES, seed_database


def test_seed_populates_once(store, db):
    assert seed_database(store) == len(SEED_ENTRIES)
    assert seed_database(store) == 0
    assert db.query(LogEntry).count() == len(SEED_ENTRIES)


def test_seeded_system_entries_have_no_product(store, db):
    seed_database(store)

    csv_runs = db.query(LogEntry).filter(LogEntry.action.in_(["CSV_IMPORT", "CSV_EXPORT"])).all()

    assert csv_runs
    assert all(entry.product_code is None for entry in csv_runs)

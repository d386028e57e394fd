from datetime import date

import pytest

from healthvault.core.database import make_engine, make_sessionmaker
from healthvault.core.errors import StoreError
from healthvault.core.repository import RecordRepository
from healthvault.core.seed import SAMPLE_RECORDS, init_db, seed_sample_data


def fields(medicine, start, end, **extra):
    values = {
        "medicine": medicine,
        "dosage": "1 tablet",
        "duration": "a while",
        "start_date": start,
        "end_date": end,
        "condition": None,
    }
    values.update(extra)
    return values


def test_seed_inserts_sample_rows_once(db):
    repo = RecordRepository(db)

    assert repo.count() == len(SAMPLE_RECORDS)
    assert seed_sample_data(db) == 0
    assert repo.count() == len(SAMPLE_RECORDS)


def test_seed_fixture_contents(db):
    rows = {record.medicine: record for record in RecordRepository(db).list_all()}

    assert rows["Aspirin"].dosage == "500mg"
    assert rows["Aspirin"].duration == "7 days"
    assert rows["Aspirin"].start_date == date(2024, 10, 15)
    assert rows["Aspirin"].end_date == date(2024, 10, 22)
    assert rows["Aspirin"].condition == "Headache"
    assert rows["Amoxicillin"].condition == "Throat Infection"
    assert rows["Vitamin D"].dosage == "1000 IU"


def test_init_db_without_seed_leaves_table_empty(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    factory = make_sessionmaker(engine)

    assert init_db(engine, factory, seed=False) == 0

    db = factory()
    try:
        assert RecordRepository(db).count() == 0
    finally:
        db.close()
        engine.dispose()


def test_list_is_ordered_by_start_date_for_any_insertion_order(db):
    repo = RecordRepository(db)
    for name, start in [("B", date(2023, 1, 5)), ("A", date(2025, 3, 1)), ("C", date(2024, 10, 20))]:
        repo.insert(fields(name, start, start))

    starts = [record.start_date for record in repo.list_all()]

    assert starts == sorted(starts, reverse=True)
    assert repo.list_all()[0].medicine == "A"


def test_insert_assigns_id_and_timestamps(db):
    record = RecordRepository(db).insert(fields("Zinc", date(2024, 1, 1), date(2024, 1, 10)))

    assert record.id is not None
    assert record.created_at is not None
    assert record.updated_at == record.created_at


def test_update_refreshes_updated_at_only(db):
    repo = RecordRepository(db)
    record = repo.insert(fields("Zinc", date(2024, 1, 1), date(2024, 1, 10)))
    created_at = record.created_at

    updated = repo.update(record.id, fields("Zinc", date(2024, 1, 1), date(2024, 1, 20), dosage="2 tablets"))

    assert updated.dosage == "2 tablets"
    assert updated.end_date == date(2024, 1, 20)
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_update_and_delete_unknown_id(db):
    repo = RecordRepository(db)

    assert repo.update(9999, fields("Zinc", date(2024, 1, 1), date(2024, 1, 2))) is None
    assert repo.delete(9999) is False
    assert repo.count() == 3


def test_delete(db):
    repo = RecordRepository(db)
    record = repo.list_all()[0]

    assert repo.delete(record.id) is True
    assert repo.get(record.id) is None


def test_search_skips_null_condition(db):
    repo = RecordRepository(db)
    repo.insert(fields("Headache Relief", date(2024, 2, 1), date(2024, 2, 2)))

    found = [record.medicine for record in repo.search("headache")]

    assert found == ["Aspirin", "Headache Relief"]


def test_search_does_not_match_duration(db):
    assert RecordRepository(db).search("days") == []


def test_missing_table_raises_store_error(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'no-table.db'}")
    db = make_sessionmaker(engine)()
    try:
        with pytest.raises(StoreError) as excinfo:
            RecordRepository(db).list_all()
    finally:
        db.close()
        engine.dispose()

    assert excinfo.value.message == "Failed to fetch records"
    assert excinfo.value.status_code == 500
    assert excinfo.value.__cause__ is not None

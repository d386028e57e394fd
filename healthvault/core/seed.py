from datetime import date

from healthvault.core.database import Base
from healthvault.core.repository import RecordRepository

SAMPLE_RECORDS = [
    {
        "medicine": "Aspirin",
        "dosage": "500mg",
        "duration": "7 days",
        "start_date": date(2024, 10, 15),
        "end_date": date(2024, 10, 22),
        "condition": "Headache",
    },
    {
        "medicine": "Amoxicillin",
        "dosage": "250mg",
        "duration": "10 days",
        "start_date": date(2024, 9, 20),
        "end_date": date(2024, 9, 30),
        "condition": "Throat Infection",
    },
    {
        "medicine": "Vitamin D",
        "dosage": "1000 IU",
        "duration": "30 days",
        "start_date": date(2024, 10, 1),
        "end_date": date(2024, 10, 31),
        "condition": "Deficiency",
    },
]


def seed_sample_data(db):
    """Insert the sample records if the table is empty. Returns how many were added."""
    repo = RecordRepository(db)
    if repo.count() > 0:
        return 0

    for fields in SAMPLE_RECORDS:
        repo.insert(dict(fields))

    print(f"[SEED] Inserted {len(SAMPLE_RECORDS)} sample records")
    return len(SAMPLE_RECORDS)


def init_db(bind, session_factory, seed=True):
    """Create the table if missing and seed an empty table."""
    Base.metadata.create_all(bind=bind)
    print(f"[DB] Table ready on {bind.url.get_backend_name()}")

    if not seed:
        return 0

    db = session_factory()
    try:
        return seed_sample_data(db)
    finally:
        db.close()

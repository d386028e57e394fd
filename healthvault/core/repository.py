"""
Persistence for medical records.

One repository over a SQLAlchemy session serves both the PostgreSQL and the
SQLite store. Every statement is built by SQLAlchemy with bound parameters.
"""
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import String, cast, func, or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthvault.core.errors import StoreError
from healthvault.models.medical_record import MedicalRecord


def utcnow():
    # Naive UTC so SQLite and PostgreSQL TIMESTAMP columns store the same value
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordRepository:

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_op(self, message):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            print(f"[STORE] {message}: {e}")
            raise StoreError(message) from e

    def _ordered(self):
        return select(MedicalRecord).order_by(
            MedicalRecord.start_date.desc(), MedicalRecord.id.desc()
        )

    def list_all(self):
        with self._store_op("Failed to fetch records"):
            return list(self.db.scalars(self._ordered()).all())

    def get(self, record_id: int):
        with self._store_op("Failed to fetch record"):
            return self.db.get(MedicalRecord, record_id)

    def count(self) -> int:
        with self._store_op("Failed to count records"):
            return self.db.scalar(select(func.count()).select_from(MedicalRecord))

    def insert(self, fields: dict):
        with self._store_op("Failed to add record"):
            now = utcnow()
            record = MedicalRecord(**fields, created_at=now, updated_at=now)
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            print(f"[RECORDS] Added #{record.id} {record.medicine}")
            return record

    def update(self, record_id: int, fields: dict):
        """Replace all user fields of a record. Returns None when the id is unknown."""
        with self._store_op("Failed to update record"):
            record = self.db.get(MedicalRecord, record_id)
            if record is None:
                return None

            for name in MedicalRecord.USER_FIELDS:
                setattr(record, name, fields.get(name))
            record.updated_at = utcnow()

            self.db.commit()
            self.db.refresh(record)
            print(f"[RECORDS] Updated #{record.id}")
            return record

    def delete(self, record_id: int) -> bool:
        with self._store_op("Failed to delete record"):
            deleted = (
                self.db.query(MedicalRecord)
                .filter(MedicalRecord.id == record_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            if deleted:
                print(f"[RECORDS] Deleted #{record_id}")
            return deleted > 0

    def search(self, term: str):
        """Case-insensitive substring match on medicine, dosage, condition and start date."""
        needle = term.lower()
        columns = (
            MedicalRecord.medicine,
            MedicalRecord.dosage,
            MedicalRecord.condition,
            cast(MedicalRecord.start_date, String),
        )
        stmt = self._ordered().where(
            or_(*(func.lower(column, type_=String).contains(needle, autoescape=True) for column in columns))
        )
        with self._store_op("Failed to search records"):
            return list(self.db.scalars(stmt).all())

    def ping(self):
        with self._store_op("Database not available"):
            self.db.execute(text("SELECT 1"))

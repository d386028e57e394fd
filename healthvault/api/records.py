"""
Records API - CRUD and search over medical records
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.orm import Session

from healthvault.core.database import get_db
from healthvault.core.errors import NotFoundError, ValidationError
from healthvault.core.repository import RecordRepository

router = APIRouter(prefix="/records", tags=["records"])


# Database dependency
def get_repository(db: Session = Depends(get_db)):
    return RecordRepository(db)


# Request models
class RecordIn(BaseModel):
    """Body of POST and PUT. Accepts the client's camelCase date names as well as the column names."""

    model_config = ConfigDict(populate_by_name=True)

    medicine: Optional[str] = None
    dosage: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    condition: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # Blank means absent; anything else is stored exactly as sent
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_fields(self):
        """Check presence and date order, return the column values."""
        missing = [
            field.alias or name
            for name, field in type(self).model_fields.items()
            if name != "condition" and getattr(self, name) is None
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if self.start_date > self.end_date:
            raise ValidationError("Start date cannot be after end date")

        return self.model_dump(by_alias=False)


# RECORDS ENDPOINTS

@router.get("")
def list_records(repo: RecordRepository = Depends(get_repository)):
    """All records, most recent start date first"""
    return [record.to_dict() for record in repo.list_all()]


@router.get("/search/{term:path}")
def search_records(term: str, repo: RecordRepository = Depends(get_repository)):
    return [record.to_dict() for record in repo.search(term)]


@router.get("/{record_id}")
def get_record(record_id: int, repo: RecordRepository = Depends(get_repository)):
    record = repo.get(record_id)
    if record is None:
        raise NotFoundError()
    return record.to_dict()


@router.post("", status_code=201)
def create_record(payload: RecordIn, repo: RecordRepository = Depends(get_repository)):
    record = repo.insert(payload.to_fields())
    return record.to_dict()


@router.put("/{record_id}")
def update_record(
    record_id: int,
    payload: RecordIn,
    repo: RecordRepository = Depends(get_repository),
):
    """Replace all fields of a record and return it"""
    record = repo.update(record_id, payload.to_fields())
    if record is None:
        raise NotFoundError()
    return record.to_dict()


@router.delete("/{record_id}")
def delete_record(record_id: int, repo: RecordRepository = Depends(get_repository)):
    if not repo.delete(record_id):
        raise NotFoundError()
    return {"message": "Record deleted successfully"}

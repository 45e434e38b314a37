# filmsync/services/record_service.py
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session, SQLModel

from filmsync.repositories.document_repo import DocumentRepository


class RecordService:
    """
    Shared CRUD rules for document-backed records.

    Rules:
      - ids are generated server-side when absent (uuid4)
      - writes merge over the existing record and keep its created_at
      - deleted is a one-way flag: no write path clears it
      - delete is a soft delete; the record stays readable
    """

    record_model: type[SQLModel] = SQLModel
    not_found_detail = "Record not found"

    def __init__(self, repo: DocumentRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def _to_record(self, data: dict[str, Any]) -> Any:
        return self.record_model.model_validate(data)

    def _not_found(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=self.not_found_detail,
        )

    # ----- Reads -----

    def find_all(self, session: Session) -> list[Any]:
        return [self._to_record(data) for data in self.repo.list_all(session)]

    def find_one(self, session: Session, record_id: str) -> Any | None:
        data = self.repo.get(session, record_id)
        return self._to_record(data) if data is not None else None

    def get_one(self, session: Session, record_id: str) -> Any:
        """
        Raises:
            HTTPException(404): if not found.
        """
        record = self.find_one(session, record_id)
        if record is None:
            raise self._not_found()
        return record

    # ----- Writes -----

    def upsert(
        self,
        session: Session,
        fields: dict[str, Any],
        record_id: str | None = None,
    ) -> Any:
        """
        Create a record, or merge `fields` into the one stored at `record_id`.
        """
        record_id = record_id or self._new_id()
        existing = self.repo.get(session, record_id) or {}

        data = {**existing, **fields, "id": record_id}
        data["created_at"] = existing.get("created_at") or self._now()
        data["deleted"] = bool(existing.get("deleted") or data.get("deleted"))

        return self._to_record(self.repo.put(session, record_id, data))

    def delete_one(self, session: Session, record_id: str) -> Any:
        """
        Soft delete: flag the record as deleted and return it.

        Raises:
            HTTPException(404): if not found.
        """
        data = self.repo.patch(session, record_id, {"deleted": True})
        if data is None:
            raise self._not_found()
        return self._to_record(data)

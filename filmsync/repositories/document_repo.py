# filmsync/repositories/document_repo.py
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from filmsync.core.errors import StoreError
from filmsync.models.document import Document

logger = logging.getLogger(__name__)


class DocumentRepository:
    """
    Data access layer for one document collection.

    Responsibilities:
      - Pure store operations (get / put / list / patch)
      - No FastAPI, no HTTP, no business logic

    Absent records come back as None. Store failures are rolled back and
    raised as StoreError, never turned into an empty result.
    """

    COLLECTION: str = ""

    # ----- Helpers -----

    def _load(self, session: Session, doc_id: str) -> Document | None:
        stmt = select(Document).where(
            Document.collection == self.COLLECTION,
            Document.id == doc_id,
        )
        return session.exec(stmt).first()

    def _fail(self, session: Session, action: str, exc: SQLAlchemyError) -> StoreError:
        session.rollback()
        logger.exception("Store %s failed for collection %r", action, self.COLLECTION)
        return StoreError(f"{action} failed on '{self.COLLECTION}': {exc}")

    # ----- Reads -----

    def get(self, session: Session, doc_id: str) -> dict[str, Any] | None:
        """Return the record stored under `doc_id`, or None if absent."""
        try:
            doc = self._load(session, doc_id)
        except SQLAlchemyError as exc:
            raise self._fail(session, "get", exc) from exc
        return dict(doc.data) if doc else None

    def list_all(self, session: Session) -> list[dict[str, Any]]:
        """Return every record in the collection, oldest write first."""
        stmt = (
            select(Document)
            .where(Document.collection == self.COLLECTION)
            .order_by(Document.seq)
        )
        try:
            docs = session.exec(stmt).all()
        except SQLAlchemyError as exc:
            raise self._fail(session, "list", exc) from exc
        return [dict(doc.data) for doc in docs]

    def find_by(self, session: Session, field: str, value: Any) -> dict[str, Any] | None:
        """Return the first record whose `field` equals `value`."""
        for record in self.list_all(session):
            if record.get(field) == value:
                return record
        return None

    # ----- Writes -----

    def put(
        self,
        session: Session,
        doc_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """Create or fully replace the record under `doc_id`."""
        try:
            doc = self._load(session, doc_id)
            if doc is None:
                doc = Document(collection=self.COLLECTION, id=doc_id, data=data)
            else:
                doc.data = dict(data)
            session.add(doc)
            session.commit()
            session.refresh(doc)
        except SQLAlchemyError as exc:
            raise self._fail(session, "put", exc) from exc
        return dict(doc.data)

    def insert_if_absent(
        self,
        session: Session,
        doc_id: str,
        data: dict[str, Any],
        commit: bool = True,
    ) -> bool:
        """
        Conditional write: store `data` only if `doc_id` is free.

        Returns:
            True if the record was written, False if the id was taken.
        """
        try:
            if self._load(session, doc_id) is not None:
                return False
            session.add(Document(collection=self.COLLECTION, id=doc_id, data=data))
            if commit:
                session.commit()
            else:
                session.flush()
        except IntegrityError:
            # Lost a race on the unique (collection, id) key
            session.rollback()
            return False
        except SQLAlchemyError as exc:
            raise self._fail(session, "insert", exc) from exc
        return True

    def patch(
        self,
        session: Session,
        doc_id: str,
        fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Merge `fields` into an existing record.

        Returns:
            The updated record, or None if `doc_id` does not exist.
        """
        try:
            doc = self._load(session, doc_id)
            if doc is None:
                return None
            # Reassign so the JSON column is flagged dirty
            doc.data = {**doc.data, **fields}
            session.add(doc)
            session.commit()
            session.refresh(doc)
        except SQLAlchemyError as exc:
            raise self._fail(session, "patch", exc) from exc
        return dict(doc.data)

    def commit(self, session: Session) -> None:
        """Commit writes staged with commit=False."""
        try:
            session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(session, "commit", exc) from exc


class MovieRepository(DocumentRepository):
    COLLECTION = "movies"


class MovieDetailRepository(DocumentRepository):
    COLLECTION = "movies-details"


class UserRepository(DocumentRepository):
    COLLECTION = "users"

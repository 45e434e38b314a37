# filmsync/services/user_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from filmsync.schemas.user import DEFAULT_ROLE, UserCreate, UserRead
from filmsync.services.record_service import RecordService

logger = logging.getLogger(__name__)


class UserService(RecordService):
    """
    Business logic for application role records.

    Responsibilities:
      - admin CRUD on role records
      - first-login provisioning with the default role
    """

    record_model = UserRead
    not_found_detail = "User not found"

    def ensure_user(self, session: Session, subject_id: str) -> UserRead:
        """
        Return the role record for `subject_id`, creating it with the
        default role on first sight.

        Creation is a conditional write; if a concurrent login created the
        record first, that record is returned.
        """
        user = self.find_one(session, subject_id)
        if user is not None:
            return user

        data = {
            "id": subject_id,
            "role": DEFAULT_ROLE,
            "created_at": self._now(),
            "deleted": False,
        }
        if self.repo.insert_if_absent(session, subject_id, data):
            logger.info("Provisioned role record for %s", subject_id)
            return self._to_record(data)
        return self.get_one(session, subject_id)

    def create_user(self, session: Session, payload: UserCreate) -> UserRead:
        """
        Create a role record (admin only).

        Raises:
            HTTPException(409): if payload.id is already taken.
        """
        if payload.id and self.repo.get(session, payload.id) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User already exists",
            )
        return self.upsert(session, {"role": payload.role}, payload.id)

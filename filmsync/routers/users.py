# filmsync/routers/users.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from filmsync.core.auth import require_admin
from filmsync.database import get_session
from filmsync.repositories.document_repo import UserRepository
from filmsync.schemas.user import UserCreate, UserRead, UserRoleUpdate
from filmsync.services.user_service import UserService

# Every route here is admin only.
router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin)],
)

repo = UserRepository()
service = UserService(repo)


@router.get("", response_model=list[UserRead])
def list_users(session: Session = Depends(get_session)):
    """
    List all role records (admin only).
    """
    return service.find_all(session)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, session: Session = Depends(get_session)):
    """
    Get a role record by Supabase user id (admin only).
    """
    return service.get_one(session, user_id)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, session: Session = Depends(get_session)):
    """
    Create a role record (admin only).

    409 if a record with the given id already exists.
    """
    return service.create_user(session, payload)


@router.put("/{user_id}", response_model=UserRead)
def change_role(
    user_id: str,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only).

    The new role reaches the user's tokens at their next login.
    """
    return service.upsert(session, {"role": payload.role}, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, session: Session = Depends(get_session)):
    """
    Soft-delete a role record (admin only).
    """
    service.delete_one(session, user_id)
    return None

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        status: UserStatus = UserStatus.ACTIVE,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        facial_descriptors: Optional[list] = None,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, fields: Mapping[str, Any]) -> bool:
        """Update the given columns (email, password_hash, name, role, status, phone, department, facial_descriptors)."""
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_face_candidates(self) -> Sequence[Tuple[int, Any]]:
        """(user_id, descriptor) for active users that enrolled a face."""
        raise NotImplementedError

    def list_admin_view(
        self,
        *,
        role: Optional[Role] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def get_stats(self, user_id: int) -> dict:
        raise NotImplementedError

    def first_admin_id(self) -> Optional[int]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; password hash and face descriptor never leave the service layer.
    """

    user_id: int
    email: str
    name: str
    password_hash: str
    role: Role
    status: UserStatus = UserStatus.ACTIVE
    phone: Optional[str] = None
    department: Optional[str] = None
    facial_descriptors: Optional[list] = None
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else "there"

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "status": self.status.value,
            "phone": self.phone,
            "department": self.department,
            "has_facial_data": bool(self.facial_descriptors),
            "created_at": isoformat_or_none(self.created_at),
        }

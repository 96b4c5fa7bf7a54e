"""
User ORM model.

Represents an authenticated principal. Credentials live with the external
identity provider; only the username and role are stored here.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Principal persistence for authorization checks
"""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class UserRole(str, enum.Enum):
    """
    Principal roles.

    ADMIN: Operator; manages assistants and may converse with any of them
    USER: End user; converses only with assistants granted to them
    """

    ADMIN = "admin"
    USER = "user"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        username: Unique login name
        role: Operator or end-user role
        created_at: Creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        sessions: Conversation sessions owned by the user (cascade delete)
        access_grants: Assistants the user may converse with (cascade delete)
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False),
        nullable=False,
        default=UserRole.USER,
    )

    sessions = relationship(
        "SessionModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    access_grants = relationship(
        "AccessGrantModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        """Whether the user holds operator privileges."""
        return self.role == UserRole.ADMIN

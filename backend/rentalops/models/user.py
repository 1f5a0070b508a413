"""User model — platform accounts for owners, staff and cleaners."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentalops.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UserRole(str, enum.Enum):
    """Values of the ``user_role`` PostgreSQL enum."""

    ADMIN = "admin"
    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"
    CLEANER = "cleaner"


user_role_enum = Enum(
    UserRole,
    name="user_role",
    values_callable=lambda members: [m.value for m in members],
)


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """User account for property owners and their team."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        user_role_enum, nullable=False, default=UserRole.OWNER, server_default=UserRole.OWNER.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true", nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    properties: Mapped[list["Property"]] = relationship(  # noqa: F821
        "Property", back_populates="owner", lazy="selectin", passive_deletes=True
    )

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role.value!r}>"

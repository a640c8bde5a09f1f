"""ORM model for application users (registration and login)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base, utcnow


class User(Base):
    """
    User account for JWT authentication.

    email is stored lowercased so lookups are case-insensitive.
    No update or delete path exists; a user is immutable after registration.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(20), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

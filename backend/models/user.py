# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""User ORM model – the identity a token is issued for."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Enum, DateTime

from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Login key.  Compared case-sensitively, exactly as stored.
    email = Column(String(255), unique=True, nullable=False, index=True)
    # passlib hash string; the salt is embedded.  Never serialized outward.
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(Enum("admin", "user", name="user_role"), nullable=False, default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

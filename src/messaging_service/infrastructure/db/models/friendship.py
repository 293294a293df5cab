from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from messaging_service.infrastructure.db.base import Base


class FriendshipModel(Base):
    """Accepted friendships, one row per pair with user_a < user_b.

    Owned by the social-graph side; this service only reads it.
    """

    __tablename__ = "friendships"

    user_a: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    user_b: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )

    __table_args__ = (
        CheckConstraint("user_a < user_b", name="ck_friendships_ordered_pair"),
    )

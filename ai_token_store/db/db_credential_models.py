"""
Credential table model.

Just the data structure - upserts and lookups live in the store.
"""

from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from ..constants import CREDENTIALS_TABLE, CREDENTIALS_UNIQUE_CONSTRAINT
from .db_config import Base


class Credential(Base):
    """One encrypted token per (user_id, platform)."""

    __tablename__ = CREDENTIALS_TABLE

    # AUTOINCREMENT on SQLite, AUTO_INCREMENT on MySQL, SERIAL on PostgreSQL
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(128), nullable=False)
    platform = Column(String(64), nullable=False)
    secret_ciphertext = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "platform", name=CREDENTIALS_UNIQUE_CONSTRAINT),
        # Without this SQLite may hand out the id of a deleted row again
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"Credential(id={self.id}, user_id='{self.user_id}', platform='{self.platform}')"

from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from grabgoals.database import Base


class StoredSession(Base):
    __tablename__ = "stored_sessions"

    key = Column(String(50), primary_key=True)  # "auth"
    token = Column(Text, nullable=False)
    user = Column(Text, nullable=False)  # JSON of the logged-in User
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

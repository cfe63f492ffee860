"""
session_store.py — Device storage for the auth session.
Keeps the bearer token and the logged-in user across restarts.
"""
import json
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import sessionmaker

from grabgoals.models.schemas import User
from grabgoals.models.stored_session import StoredSession

logger = logging.getLogger(__name__)

AUTH_KEY = "auth"


class SessionStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, token: str, user: User) -> None:
        db = self.session_factory()
        try:
            row = db.get(StoredSession, AUTH_KEY)
            if row is None:
                row = StoredSession(key=AUTH_KEY)
                db.add(row)
            row.token = token
            row.user = user.model_dump_json()
            row.updated_at = datetime.now(timezone.utc)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def load(self) -> tuple[str, User] | None:
        """Return (token, user), or None when nothing usable is stored."""
        db = self.session_factory()
        try:
            row = db.get(StoredSession, AUTH_KEY)
            if row is None:
                return None
            try:
                return row.token, User.model_validate(json.loads(row.user))
            except ValueError as e:
                logger.warning(f"Discarding unreadable stored session: {e}")
                return None
        finally:
            db.close()

    def clear(self) -> None:
        db = self.session_factory()
        try:
            db.query(StoredSession).filter_by(key=AUTH_KEY).delete()
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

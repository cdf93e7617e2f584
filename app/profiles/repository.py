import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.schemas.profile import ProfileUpsert, UserProfile

logger = logging.getLogger(__name__)

PROFILE_TABLE = "profiles"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProfileRepository(ABC):
    @abstractmethod
    def get(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abstractmethod
    def upsert(self, user_id: str, data: ProfileUpsert) -> UserProfile:
        """Create or replace the profile; ``created_at`` survives replacement."""


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self):
        self._profiles: Dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[UserProfile]:
        with self._lock:
            profile = self._profiles.get(user_id)
        return profile.model_copy(deep=True) if profile else None

    def upsert(self, user_id: str, data: ProfileUpsert) -> UserProfile:
        now = _now()
        with self._lock:
            existing = self._profiles.get(user_id)
            profile = UserProfile(
                **data.model_dump(),
                user_id=user_id,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self._profiles[user_id] = profile
        return profile.model_copy(deep=True)


class SupabaseProfileRepository(ProfileRepository):
    def __init__(self, client):
        self.sb = client

    @staticmethod
    def _to_db(user_id: str, data: ProfileUpsert) -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "gender": data.sex,
            "height_cm": data.height_cm,
            "weight_kg": data.weight_kg,
            "birthdate": data.birth_date.isoformat() if data.birth_date else None,
            "goal": data.goal,
            "diet_type": data.diet_type,
            "allergies": data.allergies,
            "cooking_effort": data.cooking_effort,
            "weekly_budget": data.weekly_budget,
            "measurement_unit": data.measurement_unit,
            "user_name": data.user_name,
            "user_email": data.user_email,
        }

    @staticmethod
    def _from_db(row: Dict[str, Any]) -> UserProfile:
        return UserProfile(
            user_id=row["user_id"],
            sex=row.get("gender"),
            height_cm=float(row.get("height_cm") or 170),
            weight_kg=float(row.get("weight_kg") or 70),
            birth_date=row.get("birthdate"),
            goal=row.get("goal"),
            diet_type=row.get("diet_type"),
            allergies=row.get("allergies") or [],
            cooking_effort=row.get("cooking_effort"),
            weekly_budget=float(row.get("weekly_budget") or 0),
            measurement_unit=row.get("measurement_unit") or "metric",
            user_name=row.get("user_name"),
            user_email=row.get("user_email"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def get(self, user_id: str) -> Optional[UserProfile]:
        res = self.sb.table(PROFILE_TABLE).select("*").eq("user_id", user_id).limit(1).execute()
        rows = getattr(res, "data", []) or []
        return self._from_db(rows[0]) if rows else None

    def upsert(self, user_id: str, data: ProfileUpsert) -> UserProfile:
        row = self._to_db(user_id, data) | {"updated_at": _now().isoformat()}
        res = self.sb.table(PROFILE_TABLE).upsert(row, on_conflict="user_id").execute()
        rows = getattr(res, "data", []) or []
        logger.info("[profile] Upserted profile for user %s", user_id)
        return self._from_db(rows[0]) if rows else (self.get(user_id) or self._from_db(row))

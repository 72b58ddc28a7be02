"""
Daily Recipes - Persistence.

Two records live in an opaque key-value store:
- "user_profile": profile, learned preferences, interaction log
- "recipe_cache": the last 50 generated recipes

Read and write failures are logged and never abort generation; a broken
record loads as empty default state.
"""

import json
import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from daily_recipes.models import Interaction, RecipeCacheEntry, UserProfile

logger = logging.getLogger(__name__)

PROFILE_KEY = "user_profile"
CACHE_KEY = "recipe_cache"

# Bumped when the persisted record layout changes
SCHEMA_VERSION = 1

MAX_CACHED_RECIPES = 50


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None:
        """Stored JSON value, or None if the key was never written."""

    def put(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value."""


class MemoryStore:
    """In-process store. Values are copied through JSON like a real store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)


class JsonFileStore:
    """One pretty-printed <key>.json file per key in a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def put(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)


# =============================================================================
# User Profile
# =============================================================================


@dataclass
class ProfileRecord:
    user_profile: UserProfile = field(default_factory=UserProfile)
    learned_preferences: dict[str, float] = field(default_factory=dict)
    interactions: list[Interaction] = field(default_factory=list)
    last_updated: datetime | None = None


def _parse_timestamp(value: Any) -> datetime | None:
    return datetime.fromisoformat(value) if isinstance(value, str) else None


class ProfileRepository:
    """Loads and saves the user-profile record."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> ProfileRecord:
        try:
            raw = self.store.get(PROFILE_KEY)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load user profile: {e}")
            return ProfileRecord()

        if raw is None:
            return ProfileRecord()
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed user profile record")
            return ProfileRecord()

        version = raw.get("schemaVersion", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            logger.warning(f"User profile has schema version {version}, expected {SCHEMA_VERSION}")

        try:
            record = ProfileRecord(
                user_profile=UserProfile.model_validate(raw.get("userProfile") or {}),
                learned_preferences={
                    str(key): value
                    for key, value in (raw.get("learnedPreferences") or {}).items()
                    if isinstance(value, (int, float)) and not isinstance(value, bool)
                },
                interactions=[
                    Interaction.model_validate(item) for item in raw.get("interactions") or []
                ],
                last_updated=_parse_timestamp(raw.get("lastUpdated")),
            )
        except (ValueError, AttributeError, TypeError) as e:
            logger.warning(f"Could not read user profile, using defaults: {e}")
            return ProfileRecord()

        logger.info("User profile loaded")
        return record

    def save(
        self,
        profile: UserProfile,
        learned_preferences: Mapping[str, float],
        interactions: Iterable[Interaction],
        now: datetime | None = None,
    ) -> bool:
        """Write the profile record. Returns False if the write failed."""
        interactions = list(interactions)
        record = {
            "schemaVersion": SCHEMA_VERSION,
            "userProfile": profile.to_dict(),
            "learnedPreferences": dict(learned_preferences),
            "lastUpdated": (now or datetime.now()).isoformat(),
            "interactionCount": len(interactions),
            "interactions": [interaction.to_dict() for interaction in interactions],
        }
        try:
            self.store.put(PROFILE_KEY, record)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save user profile: {e}")
            return False

        logger.info("User profile saved")
        return True


# =============================================================================
# Recipe Cache
# =============================================================================


class RecipeCache:
    """
    Bounded history of generated recipes, oldest evicted first.

    Every add() persists the whole cache record.
    """

    def __init__(self, store: KeyValueStore, max_entries: int = MAX_CACHED_RECIPES):
        self.store = store
        self._entries: deque[RecipeCacheEntry] = deque(self._load(), maxlen=max_entries)

    def _load(self) -> list[RecipeCacheEntry]:
        try:
            raw = self.store.get(CACHE_KEY)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load recipe cache: {e}")
            return []

        if raw is None:
            return []
        items = raw.get("entries") if isinstance(raw, dict) else None
        if not isinstance(items, list):
            logger.warning("Ignoring malformed recipe cache record")
            return []

        entries = []
        for item in items:
            try:
                entries.append(RecipeCacheEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping unreadable cache entry: {e.error_count()} errors")
        return entries

    def _save(self) -> None:
        record = {
            "schemaVersion": SCHEMA_VERSION,
            "entries": [entry.to_dict() for entry in self._entries],
        }
        try:
            self.store.put(CACHE_KEY, record)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save recipe cache: {e}")

    def add(self, entry: RecipeCacheEntry) -> None:
        self._entries.append(entry)
        self._save()

    def entries(self) -> list[RecipeCacheEntry]:
        return list(self._entries)

    def latest(self) -> RecipeCacheEntry | None:
        return self._entries[-1] if self._entries else None

    def for_date(self, day: str) -> RecipeCacheEntry | None:
        """Most recent entry generated for a YYYY-MM-DD date."""
        for entry in reversed(self._entries):
            if entry.date == day:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

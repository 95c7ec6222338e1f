"""
Profile Store - Persistence boundary for user profiles

Matching services only see the ProfileStore protocol, so the database
can be swapped for the in-memory store in tests.

Error Policy:
    Store failures are raised as ProfileStoreError and are never
    swallowed. Losing a user's wizard answers is a bug; the caller must
    be able to retry or roll back.

Usage:
    store = SQLAlchemyProfileStore(async_session)
    profile = await store.get("uid-123")
    await store.update("uid-123", {"city": "Lisbon"})
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from nomadmatch.models import UserProfile, apply_fields, profile_to_dict

logger = logging.getLogger(__name__)


class ProfileStoreError(Exception):
    """Raised when a profile cannot be read or written."""


class ProfileNotFoundError(ProfileStoreError):
    """Raised when an operation needs a profile that does not exist."""

    def __init__(self, uid: str) -> None:
        super().__init__(f"Profile not found: {uid}")
        self.uid = uid


class ProfileStore(Protocol):
    """Protocol for profile store implementations."""

    async def get(self, uid: str) -> Optional[Dict[str, Any]]:
        """Get a profile, or None if it does not exist."""
        ...

    async def update(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge fields into an existing profile and return it."""
        ...

    async def create(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Create a new profile and return it."""
        ...

    async def list_all(self) -> List[Dict[str, Any]]:
        """Every stored profile, in store order."""
        ...


class InMemoryProfileStore:
    """Dict-backed store for development/testing. Keeps insertion order."""

    def __init__(self, profiles: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._profiles: Dict[str, Dict[str, Any]] = {}
        for uid, fields in (profiles or {}).items():
            self._profiles[uid] = {**fields, "uid": uid}

    async def get(self, uid: str) -> Optional[Dict[str, Any]]:
        profile = self._profiles.get(uid)
        return copy.deepcopy(profile) if profile is not None else None

    async def update(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        if uid not in self._profiles:
            raise ProfileNotFoundError(uid)
        self._profiles[uid].update({k: v for k, v in fields.items() if k != "uid"})
        return copy.deepcopy(self._profiles[uid])

    async def create(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        if uid in self._profiles:
            raise ProfileStoreError(f"Profile already exists: {uid}")
        self._profiles[uid] = {**fields, "uid": uid}
        return copy.deepcopy(self._profiles[uid])

    async def list_all(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(p) for p in self._profiles.values()]


class SQLAlchemyProfileStore:
    """
    Profile store backed by the user_profiles table.

    Opens one session per operation, so concurrent get() calls from a
    fan-out never share a session.

    Attributes:
        session_factory: async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, uid: str) -> Optional[Dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                profile = await session.get(UserProfile, uid)
                return profile_to_dict(profile) if profile is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load profile {uid}: {e}")
            raise ProfileStoreError(f"Failed to load profile {uid}") from e

    async def update(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            async with self.session_factory() as session:
                profile = await session.get(UserProfile, uid)
                if profile is None:
                    raise ProfileNotFoundError(uid)

                apply_fields(profile, dict(fields))
                await session.commit()
                await session.refresh(profile)
                return profile_to_dict(profile)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update profile {uid}: {e}")
            raise ProfileStoreError(f"Failed to update profile {uid}") from e

    async def create(self, uid: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            async with self.session_factory() as session:
                if await session.get(UserProfile, uid) is not None:
                    raise ProfileStoreError(f"Profile already exists: {uid}")

                profile = UserProfile(uid=uid, extra={})
                apply_fields(profile, dict(fields))
                session.add(profile)
                await session.commit()
                await session.refresh(profile)
                return profile_to_dict(profile)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create profile {uid}: {e}")
            raise ProfileStoreError(f"Failed to create profile {uid}") from e

    async def list_all(self) -> List[Dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(UserProfile).order_by(UserProfile.created_at, UserProfile.uid)
                )
                return [profile_to_dict(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list profiles: {e}")
            raise ProfileStoreError("Failed to list profiles") from e

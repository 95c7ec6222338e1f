#!/usr/bin/env python3
"""
Demo Profile Seeding Script

Inserts a handful of complete dating profiles so the match flow has a
candidate pool to work with in local development.

Fields without a dedicated column (favorite_meme, favorite_song, ...)
are stored in the profile's `extra` map.

Usage:
    # Insert demo profiles (existing ones are skipped)
    python scripts/seed_profiles.py

    # Delete every profile first
    python scripts/seed_profiles.py --reset

    # Print how many profiles exist
    python scripts/seed_profiles.py --verify
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from nomadmatch.config import get_settings
from nomadmatch.database import Base, to_async_url
from nomadmatch.models import UserProfile
from nomadmatch.services.profile_store import SQLAlchemyProfileStore

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

settings = get_settings()


DEMO_PROFILES = [
    {
        "name": "Alice",
        "age": 28,
        "city": "San Francisco",
        "orientation": "Straight",
        "interests": ["hiking", "cooking", "traveling"],
        "gender": "female",
        "favorite_food": "Sushi",
        "fun_fact": "I can solve a Rubik's Cube in 30s",
        "favorite_meme": "Doge",
        "favorite_song": "Blinding Lights",
        "relationship_goals": "Serious",
        "occupation": "Software Engineer",
        "education": "Bachelor's",
        "hobbies": ["photography", "yoga"],
        "favorite_movie": "Inception",
        "enable_dating": True,
    },
    {
        "name": "Bob",
        "age": 30,
        "city": "San Francisco",
        "orientation": "Straight",
        "interests": ["gaming", "reading", "movies"],
        "gender": "male",
        "favorite_food": "Pizza",
        "fun_fact": "I once met my favorite actor in an elevator",
        "favorite_meme": "Distracted Boyfriend",
        "favorite_song": "Levitating",
        "relationship_goals": "Casual",
        "occupation": "Graphic Designer",
        "education": "Bachelor's",
        "hobbies": ["skateboarding", "blogging"],
        "favorite_movie": "The Matrix",
        "enable_dating": True,
    },
    {
        "name": "Charlie",
        "age": 32,
        "city": "San Francisco",
        "orientation": "Gay",
        "interests": ["music", "art", "dancing"],
        "gender": "male",
        "favorite_food": "Burgers",
        "fun_fact": "I can juggle 5 balls at once",
        "favorite_meme": "Pepe the Frog",
        "favorite_song": "Shape of You",
        "relationship_goals": "Friendship",
        "occupation": "Photographer",
        "education": "Master's",
        "hobbies": ["traveling", "cooking"],
        "favorite_movie": "Amélie",
        "enable_dating": True,
    },
    {
        "name": "Diana",
        "age": 27,
        "city": "San Francisco",
        "orientation": "Bisexual",
        "interests": ["yoga", "cooking", "traveling"],
        "gender": "female",
        "favorite_food": "Pasta",
        "fun_fact": "I have a pet parrot that mimics phone calls",
        "favorite_meme": "Woman Yelling at a Cat",
        "favorite_song": "Watermelon Sugar",
        "relationship_goals": "Serious",
        "occupation": "Teacher",
        "education": "Bachelor's",
        "hobbies": ["reading", "gardening"],
        "favorite_movie": "The Notebook",
        "enable_dating": True,
    },
    {
        "name": "Ethan",
        "age": 29,
        "city": "San Francisco",
        "orientation": "Straight",
        "interests": ["sports", "technology", "reading"],
        "gender": "male",
        "favorite_food": "Burrito",
        "fun_fact": "I once ran a marathon in 4 hours",
        "favorite_meme": "Grumpy Cat",
        "favorite_song": "Old Town Road",
        "relationship_goals": "Casual",
        "occupation": "Entrepreneur",
        "education": "Bachelor's",
        "hobbies": ["cycling", "cooking"],
        "favorite_movie": "Fight Club",
        "enable_dating": True,
    },
]


def demo_uid(profile: dict) -> str:
    return f"demo-{profile['name'].lower()}"


async def seed(session_factory: async_sessionmaker[AsyncSession]) -> int:
    """Insert demo profiles that are not there yet. Returns the number added."""
    store = SQLAlchemyProfileStore(session_factory)
    added = 0

    for profile in DEMO_PROFILES:
        uid = demo_uid(profile)
        if await store.get(uid) is not None:
            logger.info(f"Skipping existing profile {uid}")
            continue
        await store.create(uid, profile)
        logger.info(f"Added profile for {profile['name']} ({uid})")
        added += 1

    return added


async def reset(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        result = await session.execute(delete(UserProfile))
        await session.commit()
        logger.info(f"Deleted {result.rowcount} profiles")


async def verify(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        total = (await session.execute(select(func.count(UserProfile.uid)))).scalar() or 0
        dating = (await session.execute(
            select(func.count(UserProfile.uid)).where(UserProfile.enable_dating.is_(True))
        )).scalar() or 0
    logger.info(f"{total} profiles, {dating} with dating enabled")
    return total


async def main(args: argparse.Namespace) -> None:
    database_url = args.database_url or settings.database_url
    engine = create_async_engine(to_async_url(database_url), echo=False)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        if args.verify:
            await verify(session_factory)
            return

        if args.reset:
            await reset(session_factory)

        added = await seed(session_factory)
        logger.info(f"Seeded {added} demo profiles")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo dating profiles")
    parser.add_argument("--reset", action="store_true", help="Delete all profiles before seeding")
    parser.add_argument("--verify", action="store_true", help="Only report profile counts")
    parser.add_argument("--database-url", help="Override DATABASE_URL (sqlite:///path.db)")
    asyncio.run(main(parser.parse_args()))

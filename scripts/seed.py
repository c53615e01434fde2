"""
Seed the database with default users, categories, tags and sample posts.

Safe to run repeatedly: anything whose email or slug already exists is left
as it is.

    python scripts/seed.py
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import select

from artibrain.config import get_settings
from artibrain.database import async_session_maker, close_db, init_db
from artibrain.kernel.identity.password import hash_password
from artibrain.kernel.models import Category, Post, PostStatus, Tag, User, UserRole
from artibrain.logging_config import configure_logging, get_logger

logger = get_logger("artibrain.seed")

USERS = [
    {
        "name": "Admin User",
        "email": "admin@theartibrain.com",
        "password": "admin123",
        "role": UserRole.ADMIN,
        "bio": "Platform administrator with full access to all features and content management.",
    },
    {
        "name": "Editor User",
        "email": "editor@theartibrain.com",
        "password": "editor123",
        "role": UserRole.EDITOR,
        "bio": "Content editor specializing in AI and machine learning topics.",
    },
    {
        "name": "Author User",
        "email": "author@theartibrain.com",
        "password": "author123",
        "role": UserRole.AUTHOR,
        "bio": "AI researcher and technical writer passionate about sharing knowledge.",
    },
]

CATEGORIES = {
    "artificial-intelligence": "Artificial Intelligence",
    "machine-learning": "Machine Learning",
    "tutorials": "Tutorials",
    "news": "News",
}

TAGS = {
    "deep-learning": "Deep Learning",
    "neural-networks": "Neural Networks",
    "python": "Python",
    "tensorflow": "TensorFlow",
    "pytorch": "PyTorch",
    "nlp": "NLP",
}

POSTS = [
    {
        "title": "Getting Started with Machine Learning in 2024",
        "slug": "getting-started-machine-learning-2024",
        "text": (
            "Machine learning has become one of the most exciting and rapidly evolving fields in "
            "technology. Whether you're a complete beginner or looking to advance your skills, this "
            "comprehensive guide will help you navigate the machine learning landscape in 2024."
        ),
        "excerpt": (
            "A comprehensive guide to starting your machine learning journey in 2024, covering "
            "essential concepts, tools, and practical steps."
        ),
        "status": PostStatus.PUBLISHED,
        "author": "author@theartibrain.com",
        "category": "machine-learning",
        "tags": ["deep-learning", "python"],
    },
    {
        "title": "The Future of Artificial Intelligence: Trends and Predictions",
        "slug": "future-artificial-intelligence-trends-predictions",
        "text": (
            "As we advance further into the digital age, artificial intelligence continues to reshape "
            "industries and redefine what's possible. From autonomous vehicles to personalized "
            "medicine, AI is at the forefront of innovation."
        ),
        "excerpt": (
            "Explore the latest trends in AI technology and what experts predict for the future of "
            "artificial intelligence."
        ),
        "status": PostStatus.PUBLISHED,
        "author": "editor@theartibrain.com",
        "category": "artificial-intelligence",
        "tags": ["neural-networks"],
    },
    {
        "title": "Building Your First Neural Network with TensorFlow",
        "slug": "building-first-neural-network-tensorflow",
        "text": (
            "In this hands-on tutorial, we'll walk through the process of building your first neural "
            "network using TensorFlow. You'll learn the fundamental concepts and implement a working "
            "model step by step."
        ),
        "excerpt": (
            "Step-by-step tutorial for creating your first neural network using TensorFlow, perfect "
            "for beginners."
        ),
        "status": PostStatus.PUBLISHED,
        "author": "author@theartibrain.com",
        "category": "tutorials",
        "tags": ["neural-networks", "tensorflow"],
    },
    {
        "title": "Natural Language Processing: Understanding Human Language",
        "slug": "natural-language-processing-understanding-human-language",
        "text": (
            "Natural Language Processing (NLP) is a fascinating branch of AI that focuses on the "
            "interaction between computers and human language. Discover how machines can understand, "
            "interpret, and generate human language."
        ),
        "excerpt": (
            "An introduction to Natural Language Processing and how AI systems understand and process "
            "human language."
        ),
        "status": PostStatus.PUBLISHED,
        "author": "editor@theartibrain.com",
        "category": "artificial-intelligence",
        "tags": ["nlp", "python"],
    },
    {
        "title": "PyTorch vs TensorFlow: Choosing the Right Framework",
        "slug": "pytorch-vs-tensorflow-choosing-right-framework",
        "text": (
            "When starting with deep learning, one of the first decisions you'll face is choosing "
            "between PyTorch and TensorFlow. Both are powerful frameworks, but they have different "
            "strengths and use cases."
        ),
        "excerpt": (
            "A detailed comparison of PyTorch and TensorFlow to help you choose the best deep learning "
            "framework for your projects."
        ),
        "status": PostStatus.DRAFT,
        "author": "author@theartibrain.com",
        "category": "tutorials",
        "tags": ["tensorflow", "pytorch"],
    },
]


def _document(text: str) -> dict:
    """Wrap plain text in the editor's JSON document shape."""
    return {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }


async def _existing(session, model, column, values) -> Dict[str, object]:
    result = await session.execute(select(model).where(column.in_(list(values))))
    return {getattr(row, column.key): row for row in result.scalars().all()}


async def seed() -> Dict[str, List[str]]:
    """Insert whatever is missing and return what was created, by kind."""
    created: Dict[str, List[str]] = {"users": [], "categories": [], "tags": [], "posts": []}

    async with async_session_maker() as session:
        users = await _existing(session, User, User.email, [u["email"] for u in USERS])
        for entry in USERS:
            if entry["email"] in users:
                continue
            user = User(
                name=entry["name"],
                email=entry["email"],
                password_hash=hash_password(entry["password"]),
                role=entry["role"],
                bio=entry["bio"],
            )
            session.add(user)
            users[entry["email"]] = user
            created["users"].append(entry["email"])

        categories = await _existing(session, Category, Category.slug, CATEGORIES)
        for slug, name in CATEGORIES.items():
            if slug not in categories:
                categories[slug] = Category(name=name, slug=slug)
                session.add(categories[slug])
                created["categories"].append(name)

        tags = await _existing(session, Tag, Tag.slug, TAGS)
        for slug, name in TAGS.items():
            if slug not in tags:
                tags[slug] = Tag(name=name, slug=slug)
                session.add(tags[slug])
                created["tags"].append(name)

        await session.flush()

        posts = await _existing(session, Post, Post.slug, [p["slug"] for p in POSTS])
        now = datetime.now(timezone.utc)
        for entry in POSTS:
            if entry["slug"] in posts:
                continue
            published = entry["status"] == PostStatus.PUBLISHED
            session.add(
                Post(
                    title=entry["title"],
                    slug=entry["slug"],
                    content=_document(entry["text"]),
                    excerpt=entry["excerpt"],
                    status=entry["status"],
                    published_at=now if published else None,
                    author_id=users[entry["author"]].id,
                    categories=[categories[entry["category"]]],
                    tags=[tags[slug] for slug in entry["tags"]],
                )
            )
            created["posts"].append(entry["title"])

        await session.commit()

    return created


async def main() -> None:
    settings = get_settings()
    configure_logging(log_level=settings.log_level, environment=settings.environment, debug=settings.debug)

    await init_db()
    try:
        created = await seed()
    finally:
        await close_db()

    for kind, names in created.items():
        logger.info("Seeded %d %s", len(names), kind, extra={"names": names})
    logger.info("Database seeding completed")


if __name__ == "__main__":
    asyncio.run(main())

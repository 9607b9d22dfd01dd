"""
Sample rows for running the in-memory backend locally.
"""

from __future__ import annotations

from quotely.db import STATUS_APPROVED, DbClient

SAMPLE_QUOTES = [
    {
        "content": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "category": "Motivation",
        "tags": ["work", "passion"],
    },
    {
        "content": "Life is what happens to you while you're busy making other plans.",
        "author": "John Lennon",
        "category": "Life",
        "tags": ["life", "plans"],
    },
    {
        "content": "In the middle of difficulty lies opportunity.",
        "author": "Albert Einstein",
        "category": "Motivation",
        "tags": ["difficulty", "opportunity"],
    },
]

SAMPLE_PROVERBS = [
    {
        "content": "A journey of a thousand miles begins with a single step.",
        "origin": "Chinese",
        "category": "Perseverance",
        "meaning": "Even the biggest projects start with small beginnings.",
    },
    {
        "content": "The best time to plant a tree was twenty years ago. The second best time is now.",
        "origin": "Chinese",
        "category": "Wisdom",
        "meaning": "Act now rather than regretting what was not done earlier.",
    },
]


def seed_sample_data(db: DbClient) -> None:
    for quote in SAMPLE_QUOTES:
        db.create_quote(**quote)
    for proverb in SAMPLE_PROVERBS:
        db.create_proverb(status=STATUS_APPROVED, **proverb)

"""
Quotely backend package.

Provides a FastAPI application that serves quotes and proverbs from a
relational store, with listing, daily/random selection, trending,
dashboard aggregation, favorites, likes and user profiles.
"""

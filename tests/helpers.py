"""Shared helpers for the storage tests."""
import asyncio

from modelstore.models import User


def run(coro):
    return asyncio.run(coro)


def make_user(**overrides) -> User:
    fields = {"id": "u1", "name": "John Doe", "email": "john@x.com"}
    fields.update(overrides)
    return User.from_record(fields)

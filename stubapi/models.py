"""
Record Shapes

Dataclasses for the health, user and post payloads. Nothing here is
persisted; the records are built per request and serialized straight back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stubapi.utils import INT64_MAX, INT64_MIN, InvalidRequestBody


def _matching_values(payload: dict[str, Any], key: str) -> list[Any]:
    """
    Values whose key equals ``key`` ignoring case, in document order.

    ``null`` values are skipped so they leave the field at its current value.
    """
    wanted = key.casefold()
    return [
        value
        for name, value in payload.items()
        if name.casefold() == wanted and value is not None
    ]


def _int_field(payload: dict[str, Any], key: str) -> int:
    result = 0
    for value in _matching_values(payload, key):
        # bool is an int subclass but not a JSON number
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRequestBody()
        if not INT64_MIN <= value <= INT64_MAX:
            raise InvalidRequestBody()
        result = value
    return result


def _str_field(payload: dict[str, Any], key: str) -> str:
    result = ""
    for value in _matching_values(payload, key):
        if not isinstance(value, str):
            raise InvalidRequestBody()
        result = value
    return result


@dataclass(frozen=True)
class HealthStatus:
    """Health probe response."""

    status: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "version": self.version}


@dataclass
class User:
    """A user record."""

    id: int = 0
    name: str = ""
    email: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> User:
        """Build a user from a decoded JSON object, zero-filling absent fields."""
        return cls(
            id=_int_field(payload, "id"),
            name=_str_field(payload, "name"),
            email=_str_field(payload, "email"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass
class Post:
    """A post record. ``user_id`` is serialized as ``userId``."""

    id: int = 0
    user_id: int = 0
    title: str = ""
    body: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Post:
        """Build a post from a decoded JSON object, zero-filling absent fields."""
        return cls(
            id=_int_field(payload, "id"),
            user_id=_int_field(payload, "userId"),
            title=_str_field(payload, "title"),
            body=_str_field(payload, "body"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "body": self.body,
        }


SAMPLE_USERS = (
    User(id=1, name="Alice", email="alice@example.com"),
    User(id=2, name="Bob", email="bob@example.com"),
)

SAMPLE_POSTS = (
    Post(id=1, user_id=1, title="First Post", body="Hello world"),
    Post(id=2, user_id=1, title="Second Post", body="Another post"),
)

"""User and session records for the credential store."""

from dataclasses import dataclass
from typing import Any

from taskdeck.storage.base import optional_str, require_str


@dataclass
class User:
    """Public view of a user account, as kept inside a session."""

    id: str
    email: str
    name: str
    avatar: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "email": self.email, "name": self.name}
        if self.avatar is not None:
            data["avatar"] = self.avatar
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=require_str(data, "id"),
            email=require_str(data, "email"),
            name=require_str(data, "name"),
            avatar=optional_str(data, "avatar"),
        )


@dataclass
class UserRecord:
    """A persisted user entry, password included.

    Passwords are stored and compared as plaintext to stay compatible
    with data written by the browser build.
    """

    id: str
    email: str
    name: str
    password: str
    avatar: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "password": self.password,
        }
        if self.avatar is not None:
            data["avatar"] = self.avatar
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserRecord":
        return cls(
            id=require_str(data, "id"),
            email=require_str(data, "email"),
            name=require_str(data, "name"),
            password=require_str(data, "password"),
            avatar=optional_str(data, "avatar"),
        )

    def to_user(self) -> User:
        return User(id=self.id, email=self.email, name=self.name, avatar=self.avatar)


@dataclass
class AuthToken:
    """The single active session: token, user snapshot and absolute expiry."""

    token: str
    user: User
    expires_at: int  # epoch milliseconds

    def is_expired(self, now_ms: int) -> bool:
        """A session is valid strictly before its expiry."""
        return now_ms >= self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "user": self.user.to_dict(),
            "expiresAt": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthToken":
        return cls(
            token=data["token"],
            user=User.from_dict(data["user"]),
            expires_at=int(data["expiresAt"]),
        )

"""Simulated authentication: user accounts and a single active session.

Example:
    >>> auth = AuthService(storage)
    >>> session = await auth.login("demo@example.com", "password123")
    >>> auth.is_authenticated()
    True
"""

from taskdeck.auth.models import AuthToken, User, UserRecord
from taskdeck.auth.service import AuthService, avatar_url

__all__ = ["AuthService", "AuthToken", "User", "UserRecord", "avatar_url"]

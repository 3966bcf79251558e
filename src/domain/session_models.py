"""
Domain models for the login session.

SessionState is the value subscribers observe; LoginResult and LogoutResult
are the outcomes of the two operations that change it.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionState:
    """Logged-in flag and identity of the current user."""
    logged_in: bool = False
    user_email: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"logged_in": self.logged_in, "user_email": self.user_email}


@dataclass
class LoginResult:
    """
    Outcome of a login attempt.

    On success token and user are set. On failure user is "-" and error holds
    the payload the resource API reported.
    """
    success: bool
    token: Optional[str] = None
    user: str = "-"
    error: Any = None

    @classmethod
    def failed(cls, error: Any) -> "LoginResult":
        return cls(success=False, token=None, user="-", error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "token": self.token,
            "user": self.user,
            "error": self.error,
        }


@dataclass
class LogoutResult:
    success: bool
    message: Optional[str] = None
    error: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message, "error": self.error}

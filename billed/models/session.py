"""
Session and Authentication Models

Credentials only live for the duration of one sign-in attempt.
The identity that survives the attempt is the SessionIdentity, which is
what the other units read to know who is submitting bills.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class UserType(str, Enum):
    """Roles that can sign in to the portal."""
    EMPLOYEE = "Employee"
    ADMIN = "Admin"


class AuthStage(str, Enum):
    """Which stage of the sign-in pipeline produced an outcome."""
    LOGIN = "login"
    CREATE_ACCOUNT = "create_account"


class Credential(BaseModel):
    """
    Email and password submitted by a sign-in form.

    Only presence is checked here; format checks belong to the form.
    The password is sent exactly as typed.
    """

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)

    @field_validator('email', mode='before')
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def account_name(self) -> str:
        """Local part of the email, used as the new account's name."""
        return self.email.split("@")[0]


class SessionIdentity(BaseModel):
    """The signed-in user, as kept in the session store."""

    type: UserType
    email: str
    token: Optional[str] = None

    def to_session_value(self) -> str:
        return self.model_dump_json(exclude_none=True)


class LoginResult(BaseModel):
    """Result of the first (login) stage."""

    succeeded: bool
    token: Optional[str] = None
    error: Optional[str] = None


class AuthOutcome(BaseModel):
    """
    Unified outcome of a sign-in attempt.

    Produced either by the login stage or by the create-account fallback
    and consumed by a single completion step.
    """

    user_type: UserType
    email: str
    stage: AuthStage
    succeeded: bool
    token: Optional[str] = None
    error: Optional[str] = None
    route: Optional[str] = Field(
        default=None,
        description="Route navigated to, set once the outcome is completed"
    )

"""Reading and writing the Session Identity."""

from typing import Optional

from pydantic import ValidationError

from billed.config import get_settings
from billed.models.session import SessionIdentity
from billed.services.session.interface import SessionStoreInterface


def _user_key() -> str:
    return get_settings().session.user_key


def read_identity(
    session_store: Optional[SessionStoreInterface],
) -> Optional[SessionIdentity]:
    """
    Load the signed-in identity.

    Returns None when there is no session store, nothing stored, or the
    stored value is not a valid identity.
    """
    if session_store is None:
        return None
    raw = session_store.get_item(_user_key())
    if not raw:
        return None
    try:
        return SessionIdentity.model_validate_json(raw)
    except ValidationError:
        return None


def write_identity(
    session_store: SessionStoreInterface,
    identity: SessionIdentity,
) -> None:
    """Store `identity`, replacing any previous one."""
    session_store.set_item(_user_key(), identity.to_session_value())

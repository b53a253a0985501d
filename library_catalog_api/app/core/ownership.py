"""
Ownership guard.

Authors and books may only be changed or deleted by the user who
created them.  ``authorize`` is a pure decision over a record and a
caller id; ``ensure_owner`` is the form services call before any
mutation.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from .errors import NotOwner


class Access(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"


def _owner_of(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("owner_id")
    return getattr(record, "owner_id", None)


def authorize(record: Any, caller_id: Optional[int]) -> Access:
    """Decide whether ``caller_id`` may mutate ``record``.

    Identifiers are compared strictly: both must be of the same type
    and equal, so ``"7"`` never matches ``7``.  An anonymous caller
    (``None``) is always denied.
    """
    owner_id = _owner_of(record)
    if caller_id is None or owner_id is None:
        return Access.DENIED
    if type(owner_id) is not type(caller_id):
        return Access.DENIED
    return Access.ALLOWED if owner_id == caller_id else Access.DENIED


def ensure_owner(record: Any, caller_id: Optional[int]) -> None:
    """Raise ``NotOwner`` unless ``caller_id`` owns ``record``."""
    if authorize(record, caller_id) is Access.DENIED:
        raise NotOwner("Only the owner may modify this record")

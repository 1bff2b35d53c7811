"""
Access policy: one place deciding whether an actor may perform an action.

Kept free of HTTP and database concerns so it can be unit tested directly;
routes gather the ownership facts and call ``authorize``.
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import HTTPException, status
from app.config.permissions_config import ACTIONS
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ownership:
    """Relationship between the actor and the target resource."""
    is_owner: bool = False   # assigned student
    is_author: bool = False  # creating trainer
    is_member: bool = False  # chat participant


def is_allowed(role: Optional[str], action: str, ownership: Optional[Ownership] = None) -> bool:
    config = ACTIONS.get(action)
    if config is None:
        logger.warning(f"Unknown action in policy check: {action}")
        return False
    if role not in config["roles"]:
        return False
    ownership = ownership or Ownership()
    requirement = config["ownership"]
    if requirement is None:
        return True
    if requirement == "author":
        return ownership.is_author
    if requirement == "owner":
        return ownership.is_owner
    if requirement == "party":
        return ownership.is_owner or ownership.is_author
    if requirement == "member":
        return ownership.is_member
    return False


def authorize(user_data: dict, action: str, ownership: Optional[Ownership] = None, detail: Optional[str] = None) -> dict:
    """Raise 403 unless the user may perform the action."""
    if not is_allowed(user_data.get("role"), action, ownership):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail or f"Not allowed: {action}"
        )
    return user_data


def workout_ownership(user_id: str, workout: dict) -> Ownership:
    return Ownership(
        is_owner=workout.get("user_id") == user_id,
        is_author=workout.get("created_by") == user_id,
    )

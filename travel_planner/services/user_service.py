"""Profile data for the caller identified by ``X-User-Id``.

There is no user table: a missing profile reads as an empty one, and the
first update creates it.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from travel_planner.application.context import AppContext
from travel_planner.domain.models import UserProfile
from travel_planner.persistence.models import ProfileRecord

_logger = logging.getLogger("travel-planner.users")


def get_current_user(*, ctx: AppContext, user_id: int) -> UserProfile:
    profile = ctx.profiles.find_profile(user_id)
    return profile if profile is not None else UserProfile(user_id=user_id)


def update_profile(
    *,
    ctx: AppContext,
    user_id: int,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    preferred_units: Optional[str] = None,
) -> UserProfile:
    """Overwrite only the fields given; ``None`` keeps the stored value."""
    current = get_current_user(ctx=ctx, user_id=user_id)
    profile = ctx.profiles.save_profile(
        ProfileRecord(
            user_id=user_id,
            first_name=first_name if first_name is not None else current.first_name,
            last_name=last_name if last_name is not None else current.last_name,
            preferred_units=preferred_units if preferred_units is not None else current.preferred_units,
            updated_at=dt.datetime.now(dt.timezone.utc),
        )
    )
    _logger.info("updated profile user=%s", user_id)
    return profile


__all__ = ["get_current_user", "update_profile"]

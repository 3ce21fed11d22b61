"""Read/clear access to a user's city search history."""

from __future__ import annotations

from travel_planner.application.context import AppContext
from travel_planner.domain.models import SearchHistoryEntry


def list_search_history(*, ctx: AppContext, user_id: int, limit: int = 100) -> list[SearchHistoryEntry]:
    safe_limit = max(1, min(limit, 500))
    return list(ctx.history.list_searches_by_user(user_id, safe_limit))


def clear_search_history(*, ctx: AppContext, user_id: int) -> None:
    ctx.history.clear_searches_by_user(user_id)


__all__ = ["clear_search_history", "list_search_history"]

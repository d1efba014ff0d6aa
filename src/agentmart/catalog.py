"""In-memory filtering, sorting and search over fetched records."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from agentmart.models.agent import Agent, Importance
from agentmart.models.profile import UserSummary

ALL_IMPORTANCE = "all"


class PriceSort(str, Enum):
    """Price ordering for the catalog."""

    NONE = "none"
    ASC = "asc"
    DESC = "desc"


def filter_by_importance(
    agents: Iterable[Agent],
    importance: Importance | str = ALL_IMPORTANCE,
) -> list[Agent]:
    """Keep agents of one importance, in their original order. ``"all"`` keeps everything."""
    if importance == ALL_IMPORTANCE:
        return list(agents)
    wanted = Importance(importance)
    return [agent for agent in agents if agent.importance == wanted]


def sort_by_price(agents: Iterable[Agent], order: PriceSort | str = PriceSort.NONE) -> list[Agent]:
    """Stable sort by price. ``"none"`` keeps the original order."""
    order = PriceSort(order)
    if order is PriceSort.NONE:
        return list(agents)
    return sorted(agents, key=lambda agent: agent.price, reverse=order is PriceSort.DESC)


@dataclass(frozen=True)
class AgentFilters:
    importance: Importance | str = ALL_IMPORTANCE
    price_sort: PriceSort = PriceSort.NONE


def apply_agent_filters(agents: Sequence[Agent], filters: AgentFilters) -> list[Agent]:
    """Apply the importance filter and then the price sort."""
    return sort_by_price(filter_by_importance(agents, filters.importance), filters.price_sort)


def search_users(users: Iterable[UserSummary], query: str | None) -> list[UserSummary]:
    """Case-insensitive substring search over e-mail, names and role."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(users)

    def haystack(user: UserSummary) -> list[str]:
        first = user.first_name or ""
        last = user.last_name or ""
        return [user.email or "", first, last, f"{first} {last}", user.role.value]

    return [user for user in users if any(needle in field.lower() for field in haystack(user))]

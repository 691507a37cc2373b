"""Display ordering of events that share a day.

The policy is a closed table of rules mapping an ``eventType`` string to a
rank. Lower ranks are shown first; anything no rule claims falls into
``EventRank.OTHER``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterable, List, Sequence, TypeVar

T = TypeVar("T")


class EventRank(IntEnum):
    RENT = 0
    SUBSCRIPTION = 1
    GOAL = 2
    OTHER = 3


@dataclass(frozen=True)
class RankRule:
    rank: EventRank
    token: str
    prefix: bool = False

    def matches(self, event_type: str) -> bool:
        if self.prefix:
            return event_type.startswith(self.token)
        return event_type == self.token


DEFAULT_RANK_RULES: tuple[RankRule, ...] = (
    RankRule(EventRank.RENT, "rent"),
    RankRule(EventRank.SUBSCRIPTION, "subscription", prefix=True),
    RankRule(EventRank.GOAL, "goal", prefix=True),
)


def rank_for(event_type: str, rules: Sequence[RankRule] = DEFAULT_RANK_RULES) -> EventRank:
    for rule in rules:
        if rule.matches(event_type):
            return rule.rank
    return EventRank.OTHER


def sort_by_rank(
    items: Iterable[T],
    event_type: Callable[[T], str],
    rules: Sequence[RankRule] = DEFAULT_RANK_RULES,
) -> List[T]:
    """Stable sort by rank; items of equal rank keep their input order."""

    return sorted(items, key=lambda item: rank_for(event_type(item), rules))


__all__ = ["DEFAULT_RANK_RULES", "EventRank", "RankRule", "rank_for", "sort_by_rank"]

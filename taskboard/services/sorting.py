"""Ordering of task listings."""

from typing import Optional, Sequence, TypeVar

from ..models import PRIORITY_RANK, UNRANKED

SORT_CREATED = "created"
SORT_DUE = "due"
SORT_PRIORITY = "priority"
SORT_KEYS = (SORT_CREATED, SORT_DUE, SORT_PRIORITY)

T = TypeVar("T")


def priority_rank(priority: Optional[str]) -> int:
    return PRIORITY_RANK.get(priority, UNRANKED)


def sort_tasks(tasks: Sequence[T], sort_by: Optional[str] = None) -> list[T]:
    """Sort tasks by the given key.

    The base order is newest id first. ``due`` and ``priority`` are stable
    sorts applied on top of it, so ties keep that order.

    Args:
        tasks: Tasks with ``id``, ``due_date`` and ``priority`` attributes
        sort_by: 'created', 'due', 'priority'; anything else means 'created'

    Returns:
        A new sorted list
    """
    ordered = sorted(tasks, key=lambda t: t.id, reverse=True)

    if sort_by == SORT_DUE:
        # Tasks with due dates first, sorted by date, then tasks without due dates
        with_due = [t for t in ordered if t.due_date is not None]
        without_due = [t for t in ordered if t.due_date is None]
        return sorted(with_due, key=lambda t: t.due_date) + without_due

    if sort_by == SORT_PRIORITY:
        return sorted(ordered, key=lambda t: priority_rank(t.priority))

    return ordered

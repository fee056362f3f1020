"""
utils/joins.py
--------------
In-memory join helpers used to fold child rows onto parent rows.
The store is read one table at a time; these functions do the rest.
"""

from typing import Callable, Hashable, Iterable, Optional, TypeVar

P = TypeVar("P")
C = TypeVar("C")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def filter_by_keys(rows: Iterable[P], keys: Iterable[K], key: Callable[[P], K]) -> list[P]:
    """
    Keep every row whose key is in ``keys``, preserving row order.

    Membership is checked for each row, so matches anywhere in ``rows``
    are kept regardless of position.
    """
    wanted = set(keys)
    return [row for row in rows if key(row) in wanted]


def group_by_key(
    rows: Iterable[C],
    key: Callable[[C], K],
    value: Optional[Callable[[C], V]] = None,
) -> dict[K, list]:
    """Group rows (or ``value(row)``) into lists by ``key(row)``, keeping order."""
    groups: dict[K, list] = {}
    for row in rows:
        groups.setdefault(key(row), []).append(value(row) if value else row)
    return groups


def zip_by_key(
    parents: Iterable[P],
    children: Iterable[C],
    parent_key: Callable[[P], K],
    child_key: Callable[[C], K],
) -> list[tuple[P, list[C]]]:
    """
    Pair each parent with the children whose foreign key matches it.

    Parents without children get an empty list.

    Example:
        zip_by_key(sleeps, comments, lambda s: s.id, lambda c: c.sleep_id)
    """
    groups = group_by_key(children, child_key)
    return [(parent, groups.get(parent_key(parent), [])) for parent in parents]

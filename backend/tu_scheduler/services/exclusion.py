from __future__ import annotations

from collections.abc import Iterable, Iterator


class ExclusionSet:
    """Ids of existing schedule records to ignore during a conflict check.

    Usually the record(s) being edited, so they are not reported as
    colliding with themselves. ``ExclusionSet.EMPTY`` excludes nothing; id 0
    is an ordinary member like any other.
    """

    __slots__ = ("_ids",)

    EMPTY: "ExclusionSet"

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids = frozenset(int(item) for item in ids)

    @classmethod
    def of(cls, ids: Iterable[int] | "ExclusionSet" | None) -> "ExclusionSet":
        if ids is None:
            return cls.EMPTY
        if isinstance(ids, ExclusionSet):
            return ids
        return cls(ids)

    @property
    def ids(self) -> frozenset[int]:
        return self._ids

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExclusionSet):
            return NotImplemented
        return self._ids == other._ids

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"ExclusionSet({sorted(self._ids)!r})"


ExclusionSet.EMPTY = ExclusionSet()

"""In-process serialization of edge rewrites per member id."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from uuid import UUID


@dataclass(slots=True)
class _Entry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


class MemberLocks:
    """Registry of one reentrant lock per member id.

    ``hold`` acquires the locks of several members in sorted id order so two
    overlapping reconciliations cannot deadlock. A thread may re-enter locks it
    already holds, which lets a caller keep members locked across a reconcile
    and the commit that follows it. An entry lives only while some thread holds
    or waits for it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[UUID, _Entry] = {}

    def _checkout(self, member_id: UUID) -> _Entry:
        with self._guard:
            entry = self._entries.get(member_id)
            if entry is None:
                entry = _Entry()
                self._entries[member_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, member_id: UUID, entry: _Entry) -> None:
        # release before dropping the entry so a newcomer never gets a second lock
        entry.lock.release()
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[member_id]

    @contextmanager
    def hold(self, member_ids: Iterable[UUID]) -> Iterator[None]:
        ordered = sorted(set(member_ids))
        acquired: list[tuple[UUID, _Entry]] = []
        try:
            for member_id in ordered:
                entry = self._checkout(member_id)
                entry.lock.acquire()
                acquired.append((member_id, entry))
            yield
        finally:
            for member_id, entry in reversed(acquired):
                self._checkin(member_id, entry)

    def is_locked(self, member_id: UUID) -> bool:
        """Whether any thread currently holds or waits for ``member_id``."""
        with self._guard:
            return member_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_MEMBER_LOCKS = MemberLocks()

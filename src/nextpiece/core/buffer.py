from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional

from nextpiece.core import log
from nextpiece.core.contracts import EnqueueStatus, Piece
from nextpiece.core.metrics import inc_counter, set_gauge

DEFAULT_CAPACITY = 5


class PieceQueue:
    """
    Fixed-capacity circular queue of upcoming pieces.

    Slots ``(head + i) % cap`` for ``0 <= i < count`` hold the queued pieces,
    oldest first. A full queue rejects enqueue and an empty one rejects
    dequeue; both are reported to the caller, never raised.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, *, name: str = "preview"):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"capacity must be a positive int, got {capacity!r}")
        self.cap = capacity
        self.name = name
        self._slots: List[Optional[Piece]] = [None] * capacity
        self.head = 0
        self.count = 0
        self.l = log.get(f"nextpiece.queue.{name}")

    # -------------------- state --------------------
    @property
    def tail(self) -> Optional[int]:
        """Slot index of the newest piece, None when empty."""
        if self.count == 0:
            return None
        return (self.head + self.count - 1) % self.cap

    @property
    def free(self) -> int:
        return self.cap - self.count

    def is_empty(self) -> bool:
        return self.count == 0

    def is_full(self) -> bool:
        return self.count == self.cap

    def __len__(self) -> int:
        return self.count

    # -------------------- operations --------------------
    def enqueue(self, piece: Piece) -> EnqueueStatus:
        if self.count == self.cap:
            inc_counter("queue_rejected_total", queue=self.name, reason="full")
            self.l.info("queue full, dropping %s", piece)
            return EnqueueStatus.FULL

        idx = (self.head + self.count) % self.cap
        self._slots[idx] = piece
        self.count += 1

        inc_counter("queue_enqueue_total", queue=self.name)
        set_gauge("queue_depth", self.count, queue=self.name)
        self.l.debug("enqueue %s at slot %d (count=%d)", piece, idx, self.count)
        return EnqueueStatus.OK

    def dequeue(self) -> Optional[Piece]:
        if self.count == 0:
            inc_counter("queue_rejected_total", queue=self.name, reason="empty")
            self.l.info("queue empty, nothing to dequeue")
            return None

        piece = self._slots[self.head]
        self._slots[self.head] = None
        self.head = (self.head + 1) % self.cap
        self.count -= 1

        inc_counter("queue_dequeue_total", queue=self.name)
        set_gauge("queue_depth", self.count, queue=self.name)
        self.l.debug("dequeue %s (count=%d)", piece, self.count)
        return piece

    def peek(self) -> Optional[Piece]:
        return self._slots[self.head] if self.count else None

    def fill(self, generate: Callable[[], Piece]) -> int:
        """Enqueue generated pieces until full. Returns how many were added."""
        added = 0
        while not self.is_full():
            self.enqueue(generate())
            added += 1
        return added

    # -------------------- observation --------------------
    def __iter__(self) -> Iterator[Piece]:
        for i in range(self.count):
            yield self._slots[(self.head + i) % self.cap]  # type: ignore[misc]

    def snapshot(self) -> List[Piece]:
        """Queued pieces from head to tail."""
        return list(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.cap,
            "count": self.count,
            "free": self.free,
            "head": self.head,
            "tail": self.tail,
            "pieces": [p.to_dict() for p in self],
        }

    def __repr__(self) -> str:
        body = " -> ".join(str(p) for p in self)
        return f"PieceQueue(name={self.name!r}, cap={self.cap}, count={self.count}, [{body}])"

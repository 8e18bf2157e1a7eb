from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Tuple


__all__ = [
    "PIECE_KINDS",
    "Piece",
    "EnqueueStatus",
]


# --------- Primitive / aliases ---------
PieceKind = str

# I, O, T, L
PIECE_KINDS: Tuple[PieceKind, ...] = ("I", "O", "T", "L")


@dataclass(frozen=True, slots=True)
class Piece:
    """One upcoming piece: its shape symbol and its creation-order id."""
    kind: PieceKind
    id: int

    def __str__(self) -> str:
        return f"[{self.kind} {self.id}]"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class EnqueueStatus(Enum):
    """Outcome of PieceQueue.enqueue()."""

    OK = "ok"
    FULL = "full"  # piece dropped, queue untouched

    def __bool__(self) -> bool:
        return self is EnqueueStatus.OK

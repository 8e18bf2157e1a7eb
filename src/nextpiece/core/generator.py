from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np

from nextpiece.core import log
from nextpiece.core.contracts import PIECE_KINDS, Piece, PieceKind
from nextpiece.core.metrics import inc_counter


class PieceGenerator:
    """
    Hands out new pieces: a uniformly random kind plus the next id.

    The random source is injected (any numpy ``Generator``); pass ``seed``
    instead to get a reproducible ``default_rng``. Ids start at ``start_id``
    and only ever go up, whatever happens to the pieces afterwards.
    """

    def __init__(
        self,
        kinds: Iterable[PieceKind] = PIECE_KINDS,
        *,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        start_id: int = 0,
    ):
        self.kinds: Tuple[PieceKind, ...] = tuple(kinds)
        if not self.kinds:
            raise ValueError("kinds must not be empty")
        if start_id < 0:
            raise ValueError("start_id must be >= 0")
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._next_id = int(start_id)
        self.l = log.get("nextpiece.generator")

    @property
    def next_id(self) -> int:
        """Id the next generate() call will assign."""
        return self._next_id

    def generate(self) -> Piece:
        kind = self.kinds[int(self.rng.integers(len(self.kinds)))]
        piece = Piece(kind=kind, id=self._next_id)
        self._next_id += 1
        inc_counter("pieces_generated_total", kind=kind)
        self.l.debug("generated %s", piece)
        return piece

    __call__ = generate

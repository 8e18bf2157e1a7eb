# src/nextpiece/app/session.py
from __future__ import annotations
import sys
from enum import Enum
from typing import Optional, TextIO

from nextpiece.core.buffer import PieceQueue
from nextpiece.core.contracts import EnqueueStatus, Piece
from nextpiece.core.generator import PieceGenerator
from nextpiece.core.log import get as get_logger
from nextpiece.core.metrics import Timer

log = get_logger("nextpiece.session")


class Command(Enum):
    CONSUME = "consume"
    INSERT = "insert"
    EXIT = "exit"


_ALIASES = {
    "1": Command.CONSUME, "consume": Command.CONSUME, "play": Command.CONSUME,
    "2": Command.INSERT, "insert": Command.INSERT,
    "0": Command.EXIT, "exit": Command.EXIT, "quit": Command.EXIT,
}


def parse_command(text: str) -> Optional[Command]:
    """Map a menu entry to a Command, None if it is not one."""
    return _ALIASES.get(text.strip().lower())


class PreviewSession:
    """Drives one PieceQueue + PieceGenerator pair from menu commands."""

    def __init__(self, queue: PieceQueue, generator: PieceGenerator, out: Optional[TextIO] = None):
        self.queue = queue
        self.generator = generator
        self.out = out or sys.stdout

    def _say(self, msg: str) -> None:
        print(msg, file=self.out)

    def prime(self) -> int:
        self._say(f"Filling the next-pieces queue with {self.queue.cap} pieces...")
        added = self.queue.fill(self.generator.generate)
        log.info("primed queue=%s added=%d", self.queue.name, added)
        self._say("Queue ready. Let's play!")
        return added

    def consume(self) -> Optional[Piece]:
        """Play the head piece and top the queue back up with a new one."""
        with Timer("session_step_ms", action="consume"):
            played = self.queue.dequeue()
            if played is None:
                self._say("Queue is empty! No piece to play.")
                return None
            self._say(f"Played piece {played}.")
            self.insert()
            return played

    def insert(self) -> EnqueueStatus:
        with Timer("session_step_ms", action="insert"):
            piece = self.generator.generate()
            status = self.queue.enqueue(piece)
            if status is EnqueueStatus.FULL:
                self._say(f"Queue is full! Cannot insert piece {piece}.")
            else:
                self._say(f"Piece {piece} added to the back of the queue.")
            return status

    def handle(self, text: str) -> bool:
        """Run one menu entry. Returns False once the player asks to exit."""
        cmd = parse_command(text)
        if cmd is Command.CONSUME:
            self.consume()
        elif cmd is Command.INSERT:
            self.insert()
        elif cmd is Command.EXIT:
            self._say("Game over. See you next round!")
            return False
        else:
            log.debug("invalid menu input %r", text)
            self._say("Invalid option. Try again.")
        return True

from __future__ import annotations

import json

from nextpiece.core.buffer import PieceQueue

RULE = "=" * 44

MENU = (
    "\n--- Actions ---\n"
    "1. Play next piece (dequeue)\n"
    "2. Insert new piece (enqueue)\n"
    "0. Exit\n"
)

PROMPT = "Choose an option: "


def render_text(queue: PieceQueue) -> str:
    lines = [
        f"=== NEXT PIECES ({queue.count}) ===",
        f"   Capacity: {queue.cap} | Occupied: {queue.count} | Free: {queue.free}",
    ]
    if queue.is_empty():
        lines.append("   Queue is EMPTY.")
    else:
        lines.append("   Queue (front -> back): " + " -> ".join(str(p) for p in queue))
    lines.append(RULE)
    return "\n".join(lines)


def render_json(queue: PieceQueue) -> str:
    return json.dumps(queue.to_dict(), ensure_ascii=False)

import json

from nextpiece.app.render import MENU, render_json, render_text
from nextpiece.core.buffer import PieceQueue
from nextpiece.core.contracts import Piece


def test_render_empty():
    text = render_text(PieceQueue(5))
    assert "=== NEXT PIECES (0) ===" in text
    assert "Capacity: 5 | Occupied: 0 | Free: 5" in text
    assert "Queue is EMPTY." in text


def test_render_head_to_tail_after_wrap():
    q = PieceQueue(3)
    for p in (Piece("I", 0), Piece("O", 1), Piece("T", 2)):
        q.enqueue(p)
    q.dequeue()
    q.enqueue(Piece("L", 3))

    text = render_text(q)
    assert "Queue (front -> back): [O 1] -> [T 2] -> [L 3]" in text
    assert "Free: 0" in text

    d = json.loads(render_json(q))
    assert [p["id"] for p in d["pieces"]] == [1, 2, 3]
    assert d["head"] == 1 and d["tail"] == 0


def test_menu_lists_three_options():
    assert "1." in MENU and "2." in MENU and "0." in MENU

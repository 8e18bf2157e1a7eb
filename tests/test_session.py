import io

import pytest

from nextpiece.app.session import Command, PreviewSession, parse_command
from nextpiece.core import metrics
from nextpiece.core.buffer import PieceQueue
from nextpiece.core.contracts import EnqueueStatus
from nextpiece.core.generator import PieceGenerator


def make_session(cap=5, seed=11):
    out = io.StringIO()
    s = PreviewSession(PieceQueue(cap), PieceGenerator(seed=seed), out=out)
    return s, out


def test_prime_fills_queue():
    s, out = make_session()
    assert s.prime() == 5
    assert s.queue.is_full()
    assert [p.id for p in s.queue] == [0, 1, 2, 3, 4]
    assert "Queue ready" in out.getvalue()


def test_consume_plays_head_and_refills():
    s, out = make_session()
    s.prime()
    head = s.queue.peek()

    played = s.consume()
    assert played == head
    assert s.queue.is_full()
    assert [p.id for p in s.queue] == [1, 2, 3, 4, 5]
    assert f"Played piece {head}." in out.getvalue()


def test_consume_on_empty_generates_nothing():
    s, out = make_session()
    assert s.consume() is None
    assert s.queue.is_empty()
    assert s.generator.next_id == 0
    assert "Queue is empty!" in out.getvalue()


def test_insert_on_full_reports_full():
    s, out = make_session(cap=3)
    s.prime()
    before = s.queue.snapshot()
    assert s.insert() is EnqueueStatus.FULL
    assert s.queue.snapshot() == before
    # the rejected piece still used up an id
    assert s.generator.next_id == 4
    assert "Queue is full!" in out.getvalue()


def test_insert_after_consume_path():
    s, _ = make_session(cap=3)
    s.queue.enqueue(s.generator.generate())
    assert s.insert() is EnqueueStatus.OK
    assert len(s.queue) == 2


@pytest.mark.parametrize("text,cmd", [
    ("1", Command.CONSUME), (" play\n", Command.CONSUME), ("CONSUME", Command.CONSUME),
    ("2\n", Command.INSERT), ("insert", Command.INSERT),
    ("0", Command.EXIT), ("Quit", Command.EXIT), ("exit\n", Command.EXIT),
    ("", None), ("3", None), ("abc", None), ("1 2", None),
])
def test_parse_command(text, cmd):
    assert parse_command(text) is cmd


def test_handle_dispatch_and_invalid_input():
    s, out = make_session(cap=4)
    s.prime()
    snap = s.queue.snapshot()

    assert s.handle("banana") is True
    assert s.queue.snapshot() == snap
    assert "Invalid option" in out.getvalue()

    assert s.handle("1") is True
    assert s.queue.snapshot() == snap[1:] + [s.queue.snapshot()[-1]]

    assert s.handle("0") is False
    assert "Game over" in out.getvalue()


def test_step_latency_recorded():
    s, _ = make_session()
    s.prime()
    s.consume()
    hists = {(h["name"], h["labels"].get("action")): h for h in metrics.snapshot_all()["hists"]}
    assert hists[("session_step_ms", "consume")]["count"] == 1
    assert hists[("session_step_ms", "insert")]["count"] == 1

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, TextIO

from nextpiece.app.render import MENU, PROMPT, render_json, render_text
from nextpiece.app.session import PreviewSession
from nextpiece.core import log
from nextpiece.core.metrics import emit_snapshot
from nextpiece.wire_config import build, load_config


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nextpiece", description="Next-pieces preview queue")
    ap.add_argument("--config", help="YAML config (see config/preview.yaml)")
    ap.add_argument("--capacity", type=int, help="queue capacity (default 5)")
    ap.add_argument("--seed", type=int, help="seed for piece kinds")
    ap.add_argument("--kinds", help="piece alphabet, e.g. IOTL or I,O,T,L")
    ap.add_argument("--json", action="store_true", help="render the queue as JSON lines")
    ap.add_argument("--log-level", default=None, help="LOG_LEVEL override (default WARNING)")
    ap.add_argument("--metrics", action="store_true", help="log a metrics snapshot on exit")
    return ap


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    # ปกติเงียบไว้ที่ WARNING ไม่ให้ log ปนกับหน้าจอคิว
    level = args.log_level or os.getenv("LOG_LEVEL", "WARNING")
    log.setup(level)
    log.set_level(level)
    lg = log.get("nextpiece.cli")

    try:
        cfg = load_config(args.config, capacity=args.capacity, seed=args.seed, kinds=args.kinds)
    except (ValueError, FileNotFoundError) as e:
        ap.error(str(e))

    queue, gen = build(cfg)
    lg.info("config capacity=%d kinds=%s seed=%s", cfg.capacity, "".join(cfg.kinds), cfg.seed)

    session = PreviewSession(queue, gen, out=stdout)
    session.prime()

    render = render_json if args.json else render_text
    running = True
    while running:
        print("\n" + render(queue), file=stdout)
        print(MENU, file=stdout)
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:  # EOF
            print(file=stdout)
            running = session.handle("exit")
            continue
        running = session.handle(line)

    if args.metrics:
        mlog = log.get("metrics")
        mlog.setLevel("INFO")
        emit_snapshot(mlog, json_mode=(os.getenv("LOG_JSON", "0") == "1"))
    return 0


if __name__ == "__main__":
    sys.exit(main())

import os
from nextpiece.core import log
from nextpiece.core.metrics import emit_snapshot
from nextpiece.app.render import render_text
from nextpiece.app.session import PreviewSession
from nextpiece.wire_config import build, load_config

def main():
    log.setup()
    cfg = load_config(os.getenv("PREVIEW_CONFIG"), seed=int(os.getenv("DEMO_SEED", "7")))
    queue, gen = build(cfg)
    session = PreviewSession(queue, gen)
    session.prime()

    # เดโม่: เล่น 3 ตัว, ลองแทรกตอนคิวเต็ม, แล้วออก
    for cmd in ["1", "1", "2", "1", "oops", "0"]:
        print(render_text(queue))
        print(f"> {cmd}")
        if not session.handle(cmd):
            break

    emit_snapshot(json_mode=(os.getenv("LOG_JSON", "0") == "1"))

if __name__ == "__main__":
    main()

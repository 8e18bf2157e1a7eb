# src/nextpiece/wire_config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from nextpiece.core.buffer import DEFAULT_CAPACITY, PieceQueue
from nextpiece.core.contracts import PIECE_KINDS
from nextpiece.core.generator import PieceGenerator


@dataclass
class PreviewConfig:
    capacity: int = DEFAULT_CAPACITY
    name: str = "preview"
    kinds: Tuple[str, ...] = field(default_factory=lambda: PIECE_KINDS)
    seed: Optional[int] = None
    start_id: int = 0

    def __post_init__(self):
        self.capacity = _as_int(self.capacity, "capacity")
        if self.capacity <= 0:
            raise ValueError(f"capacity must be > 0, got {self.capacity}")
        self.kinds = _as_kinds(self.kinds)
        if self.seed is not None:
            self.seed = _as_int(self.seed, "seed")
        self.start_id = _as_int(self.start_id, "start_id")
        if self.start_id < 0:
            raise ValueError("start_id must be >= 0")


def _as_int(v: Any, what: str) -> int:
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise ValueError(f"{what} must be an integer, got {v!r}")
    try:
        return int(v)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} must be an integer, got {v!r}") from e


def _as_kinds(v: Any) -> Tuple[str, ...]:
    # "IOTL", "I,O,T,L" หรือ list ก็ได้
    if isinstance(v, str):
        items = [s.strip() for s in v.split(",")] if "," in v else list(v.strip())
    elif isinstance(v, (list, tuple)):
        items = [str(s).strip() for s in v]
    else:
        raise ValueError(f"kinds must be a string or a list, got {v!r}")
    kinds = tuple(s for s in items if s)
    if not kinds:
        raise ValueError("kinds must not be empty")
    return kinds


def _section(data: Dict[str, Any], key: str, path: Path) -> Dict[str, Any]:
    sec = data.get(key) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"bad config {path}: '{key}' must be a mapping, got {type(sec).__name__}")
    return sec


def load_yaml(yaml_path: str | os.PathLike) -> Dict[str, Any]:
    """อ่าน preview.yaml แล้วแปลงเป็น kwargs ของ PreviewConfig"""
    path = Path(yaml_path)
    if not path.is_file():
        raise FileNotFoundError(f"config not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"bad config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"bad config {path}: top level must be a mapping, got {type(data).__name__}")

    q = _section(data, "queue", path)
    g = _section(data, "generator", path)
    out: Dict[str, Any] = {}
    for key, src in (("capacity", q), ("name", q), ("kinds", g), ("seed", g), ("start_id", g)):
        if key in src:
            out[key] = src[key]
    return out


def env_overrides() -> Dict[str, Any]:
    load_dotenv()
    out: Dict[str, Any] = {}
    for env, key in (("PREVIEW_CAPACITY", "capacity"), ("PREVIEW_SEED", "seed"), ("PREVIEW_KINDS", "kinds")):
        v = os.getenv(env)
        if v:
            out[key] = v
    return out


def load_config(yaml_path: str | os.PathLike | None = None, **overrides: Any) -> PreviewConfig:
    """defaults < yaml < env < explicit overrides (None values are ignored)."""
    kw: Dict[str, Any] = {}
    if yaml_path is not None:
        kw.update(load_yaml(yaml_path))
    kw.update(env_overrides())
    kw.update({k: v for k, v in overrides.items() if v is not None})
    return PreviewConfig(**kw)


def build(cfg: PreviewConfig) -> Tuple[PieceQueue, PieceGenerator]:
    queue = PieceQueue(cfg.capacity, name=cfg.name)
    gen = PieceGenerator(cfg.kinds, seed=cfg.seed, start_id=cfg.start_id)
    return queue, gen


def build_from_yaml(yaml_path: str | os.PathLike) -> Tuple[PieceQueue, PieceGenerator]:
    return build(load_config(yaml_path))


__all__ = ["PreviewConfig", "load_yaml", "env_overrides", "load_config", "build", "build_from_yaml"]

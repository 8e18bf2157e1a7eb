from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Tuple

import numpy as np

# ---------------- Utilities ----------------

LabelKey = Tuple[Tuple[str, str], ...]  # sorted tuple of (k,v)


def _labels_key(labels: Dict[str, Any] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


# ---------------- Metric types ----------------

@dataclass
class _Base:
    name: str
    labels: LabelKey


class Counter(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0
        self._lock = threading.Lock()

    def inc(self, n: float = 1.0) -> None:
        with self._lock:
            self._value += n

    def value(self) -> float:
        with self._lock:
            return self._value


class Gauge(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0
        self._lock = threading.Lock()

    def set(self, v: float) -> None:
        with self._lock:
            self._value = float(v)

    def value(self) -> float:
        with self._lock:
            return self._value


class Histogram(_Base):
    def __init__(self, name: str, labels: LabelKey, maxlen: int = 2048):
        super().__init__(name, labels)
        self._values: Deque[float] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def observe(self, v: float) -> None:
        with self._lock:
            self._values.append(float(v))

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            vals = np.fromiter(self._values, dtype=float)
        if vals.size == 0:
            return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0,
                    "p50": 0.0, "p90": 0.0, "p99": 0.0}
        p50, p90, p99 = np.percentile(vals, [50, 90, 99])
        return {
            "count": float(vals.size),
            "min": float(vals.min()),
            "max": float(vals.max()),
            "mean": float(vals.mean()),
            "p50": float(p50),
            "p90": float(p90),
            "p99": float(p99),
        }


# ---------------- Registry ----------------

class _Registry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._counters: Dict[Tuple[str, LabelKey], Counter] = {}
        self._gauges: Dict[Tuple[str, LabelKey], Gauge] = {}
        self._hists: Dict[Tuple[str, LabelKey], Histogram] = {}

    def _get(self, table: Dict, factory, name: str, labels: Dict[str, Any] | None):
        key = (name, _labels_key(labels))
        with self._lock:
            m = table.get(key)
            if m is None:
                m = factory(name, key[1])
                table[key] = m
            return m

    def counter(self, name: str, labels: Dict[str, Any] | None) -> Counter:
        return self._get(self._counters, Counter, name, labels)

    def gauge(self, name: str, labels: Dict[str, Any] | None) -> Gauge:
        return self._get(self._gauges, Gauge, name, labels)

    def hist(self, name: str, labels: Dict[str, Any] | None) -> Histogram:
        return self._get(self._hists, Histogram, name, labels)

    def items(self):
        with self._lock:
            return (
                list(self._counters.items()),
                list(self._gauges.items()),
                list(self._hists.items()),
            )

    def clear(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._hists.clear()


_REG = _Registry()

# ---------------- Public API ----------------

def inc_counter(name: str, n: float = 1.0, **labels: Any) -> None:
    _REG.counter(name, labels).inc(n)


def set_gauge(name: str, v: float, **labels: Any) -> None:
    _REG.gauge(name, labels).set(v)


def observe_hist(name: str, v: float, **labels: Any) -> None:
    _REG.hist(name, labels).observe(v)


def counter_value(name: str, **labels: Any) -> float:
    """Current value of a counter (0.0 if it was never touched)."""
    return _REG.counter(name, labels).value()


def gauge_value(name: str, **labels: Any) -> float:
    return _REG.gauge(name, labels).value()


def reset() -> None:
    """Drop every metric (tests start from a clean registry)."""
    _REG.clear()


# ---------------- Timer Helper ----------------

class Timer:
    """Context manager for measuring latency and reporting into a histogram."""
    def __init__(self, hist_name: str, **labels: Any) -> None:
        self.hist_name = hist_name
        self.labels = labels
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        dt_ms = (time.perf_counter() - self._t0) * 1000.0
        observe_hist(self.hist_name, dt_ms, **self.labels)
        return False


# ---------------- Snapshot / emit ----------------

def snapshot_all() -> dict:
    """Return a snapshot of current metrics."""
    counters, gauges, hists = _REG.items()
    out = {"counters": [], "gauges": [], "hists": []}
    for (name, labels), m in counters:
        out["counters"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in gauges:
        out["gauges"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in hists:
        out["hists"].append({"name": name, "labels": dict(labels), **m.snapshot()})
    return out


def emit_snapshot(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Log every metric once (the CLI calls this on exit with --metrics)."""
    lg = logger or logging.getLogger("metrics")
    snap = snapshot_all()

    if json_mode:
        for kind, rows in (("counter", snap["counters"]), ("gauge", snap["gauges"]), ("hist", snap["hists"])):
            for row in rows:
                lg.info({"type": kind, **row})
        return

    for row in snap["counters"]:
        lg.info(f"[ctr] {row['name']} {row['labels']} value={row['value']:.0f}")
    for row in snap["gauges"]:
        lg.info(f"[gauge] {row['name']} {row['labels']} value={row['value']:.3f}")
    for s in snap["hists"]:
        lg.info(
            f"[hist] {s['name']} {s['labels']} "
            f"n={int(s['count'])} min={s['min']:.3f} p50={s['p50']:.3f} "
            f"p90={s['p90']:.3f} p99={s['p99']:.3f} "
            f"max={s['max']:.3f} mean={s['mean']:.3f}"
        )

from pathlib import Path

import pytest

from nextpiece.wire_config import PreviewConfig, build, build_from_yaml, load_config

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "preview.yaml"


def write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "preview.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults():
    cfg = load_config()
    assert cfg == PreviewConfig()
    assert cfg.capacity == 5
    assert cfg.kinds == ("I", "O", "T", "L")
    assert cfg.seed is None


def test_shipped_yaml_matches_defaults():
    queue, gen = build_from_yaml(REPO_CONFIG)
    assert queue.cap == 5 and queue.name == "preview"
    assert gen.kinds == ("I", "O", "T", "L")
    assert gen.next_id == 0


def test_yaml_values(tmp_path):
    p = write(tmp_path, """
queue:
  capacity: 3
  name: p2
generator:
  kinds: [S, Z]
  seed: 4
  start_id: 100
""")
    cfg = load_config(p)
    assert (cfg.capacity, cfg.name, cfg.kinds, cfg.seed, cfg.start_id) == (3, "p2", ("S", "Z"), 4, 100)
    queue, gen = build(cfg)
    assert queue.cap == 3
    assert gen.generate().id == 100


def test_empty_yaml_is_defaults(tmp_path):
    assert load_config(write(tmp_path, "")) == PreviewConfig()


def test_precedence_yaml_env_override(tmp_path, monkeypatch):
    p = write(tmp_path, "queue:\n  capacity: 3\ngenerator:\n  seed: 1\n")
    monkeypatch.setenv("PREVIEW_CAPACITY", "7")
    monkeypatch.setenv("PREVIEW_KINDS", "I,O")
    cfg = load_config(p)
    assert cfg.capacity == 7
    assert cfg.kinds == ("I", "O")
    assert cfg.seed == 1

    cfg = load_config(p, capacity=9, seed=None)
    assert cfg.capacity == 9
    assert cfg.seed == 1


@pytest.mark.parametrize("kw", [
    {"capacity": 0}, {"capacity": "many"}, {"capacity": True},
    {"kinds": ""}, {"kinds": []}, {"kinds": 5}, {"seed": "x"}, {"start_id": -2},
    {"capacity": 2.7}, {"seed": 1.9},
])
def test_invalid_values(kw):
    with pytest.raises(ValueError):
        PreviewConfig(**kw)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_integral_float_accepted():
    assert PreviewConfig(capacity=4.0).capacity == 4


def test_fractional_capacity_in_yaml(tmp_path):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, "queue:\n  capacity: 2.7\n"))


@pytest.mark.parametrize("text", [
    "queue: 5\n",
    "generator: [I, O]\n",
    "- a\n- b\n",
    "queue: [unclosed\n",
])
def test_malformed_yaml_is_value_error(tmp_path, text):
    with pytest.raises(ValueError, match="bad config"):
        load_config(write(tmp_path, text))

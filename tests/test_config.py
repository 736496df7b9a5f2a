import json
from pathlib import Path

import pytest

from omsim.config import CampaignConfig, load_config


def test_defaults():
    cfg = load_config(None)
    assert cfg.cellar_slot_hours == 12
    assert cfg.seed is None
    assert cfg.warn_degenerate is True


def test_load_overrides(tmp_path: Path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"seed": 3, "cellar_slot_hours": 24}))
    cfg = load_config(p)
    assert cfg.seed == 3
    assert cfg.cellar_slot_hours == 24


def test_unknown_keys_rejected(tmp_path: Path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"seed": 3, "slots": 8}))
    with pytest.raises(ValueError, match="slots"):
        load_config(p)


def test_invalid_values():
    with pytest.raises(ValueError):
        CampaignConfig(cellar_slot_hours=-1)


def test_spawn_rng_is_seeded_per_config():
    a, b = CampaignConfig(seed=4), CampaignConfig(seed=4)
    first = a.spawn_rng().random(3)
    assert (first == b.spawn_rng().random(3)).all()
    assert not (first == a.spawn_rng().random(3)).all()
    assert a == b

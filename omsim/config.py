from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
import json

import numpy as np


@dataclass
class CampaignConfig:
    """Knobs shared by every campaign built in one simulation run.

    A config also owns the seed sequence that noise generators are spawned
    from, so campaigns built from one seeded config get distinct but
    reproducible noise.  Share a config within one worker only.
    """

    cellar_slot_hours: int = 12     # cellar window offset per slot index
    seed: Optional[int] = None      # noise generator seed; None = fresh entropy
    warn_degenerate: bool = True    # log campaigns of type Two/One
    _seeds: Optional[np.random.SeedSequence] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if int(self.cellar_slot_hours) != self.cellar_slot_hours or self.cellar_slot_hours < 0:
            raise ValueError("cellar_slot_hours must be a non-negative integer")
        self.cellar_slot_hours = int(self.cellar_slot_hours)

    def spawn_rng(self) -> np.random.Generator:
        """Return a generator on the next child of this config's seed sequence."""
        # created on first use so that a seed set after construction still counts
        if self._seeds is None:
            self._seeds = np.random.SeedSequence(self.seed)
        return np.random.default_rng(self._seeds.spawn(1)[0])


def load_config(path: Path | str | None) -> CampaignConfig:
    """Load a :class:`CampaignConfig` from a JSON file of field overrides."""
    if path is None:
        return CampaignConfig()
    with open(path) as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    known = {f.name for f in fields(CampaignConfig) if f.init}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown config keys {unknown}")
    return CampaignConfig(**data)

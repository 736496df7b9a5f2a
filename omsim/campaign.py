from __future__ import annotations

from typing import Optional, Sequence, Union
import math
import numpy as np

from .builder import (
    CampaignState,
    CampaignType,
    CampaignValidationError,
    DegenerateCampaignWarning,
    ROOM_SLOTS,
    compute_state,
)
from .config import CampaignConfig
from .rooms import Room, RoomKind
from .stats import SampleStatistics

RngLike = Union[np.random.Generator, np.random.SeedSequence, int, None]


class Campaign:
    """One synthetic 7-day "6+1" measurement campaign.

    ``start``, the room assignment (``assignment``, ``rooms``, ``cellar``) and
    ``noise_level`` are the only inputs.  Every setter rebuilds the complete
    derived state and swaps it in with a single assignment, so readers never
    observe a half-updated campaign.  A failing setter raises
    :class:`CampaignValidationError` and keeps the previous state.

    The noise generator is owned by the instance.  Without an explicit ``rng``
    it is spawned from ``config``, so two campaigns sharing a seeded config
    draw different noise.  Campaigns can be built in parallel without locking
    as long as each worker uses its own config or passes its own ``rng``.
    """

    def __init__(
        self,
        start: int,
        assignment: Sequence[Room],
        noise_level: int = 0,
        *,
        config: Optional[CampaignConfig] = None,
        rng: RngLike = None,
    ):
        self._config = config if config is not None else CampaignConfig()
        if isinstance(rng, np.random.Generator):
            self._rng = rng
        elif rng is None:
            self._rng = self._config.spawn_rng()
        else:
            self._rng = np.random.default_rng(rng)
        self._state = self._compute(start, assignment, noise_level)

    def _compute(self, start, assignment, noise_level) -> CampaignState:
        return compute_state(
            start,
            assignment,
            noise_level,
            rng=self._rng,
            cellar_slot_hours=self._config.cellar_slot_hours,
            warn_degenerate=self._config.warn_degenerate,
        )

    # ----- inputs -------------------------------------------------------

    @property
    def config(self) -> CampaignConfig:
        return self._config

    @property
    def start(self) -> int:
        return self._state.start

    @start.setter
    def start(self, value: int) -> None:
        s = self._state
        self._state = self._compute(value, s.assignment, s.noise_level)

    @property
    def noise_level(self) -> int:
        return self._state.noise_level

    @noise_level.setter
    def noise_level(self, value: int) -> None:
        s = self._state
        self._state = self._compute(s.start, s.assignment, value)

    @property
    def assignment(self) -> tuple[Room, ...]:
        """All seven slots in protocol order."""
        return self._state.assignment

    @assignment.setter
    def assignment(self, value: Sequence[Room]) -> None:
        s = self._state
        self._state = self._compute(s.start, tuple(value), s.noise_level)

    room_pattern = assignment

    @property
    def rooms(self) -> tuple[Room, ...]:
        """The six non-cellar slots in protocol order."""
        return self._state.rooms

    @rooms.setter
    def rooms(self, value: Sequence[Room]) -> None:
        new_rooms = list(value)
        if len(new_rooms) != ROOM_SLOTS:
            raise CampaignValidationError(
                f"wrong room count: {ROOM_SLOTS} rooms are needed to create a campaign, got {len(new_rooms)}"
            )
        s = self._state
        it = iter(new_rooms)
        slots = tuple(slot if i == s.cellar_slot else next(it) for i, slot in enumerate(s.assignment))
        self._state = self._compute(s.start, slots, s.noise_level)

    @property
    def cellar(self) -> Room:
        return self._state.cellar

    @cellar.setter
    def cellar(self, value: Room) -> None:
        if not isinstance(value, Room) or value.kind is not RoomKind.CELLAR:
            raise CampaignValidationError(f"cellar slot needs a cellar room, got {value!r}")
        s = self._state
        slots = tuple(value if i == s.cellar_slot else slot for i, slot in enumerate(s.assignment))
        self._state = self._compute(s.start, slots, s.noise_level)

    # ----- derived ------------------------------------------------------

    @property
    def variation(self) -> str:
        return self._state.variation

    @property
    def cellar_slot(self) -> int:
        return self._state.cellar_slot

    @property
    def campaign_type(self) -> CampaignType:
        return self._state.campaign_type

    @property
    def room_samples(self) -> np.ndarray:
        """144 room values, ascending."""
        return self._state.room_samples

    @property
    def cellar_samples(self) -> np.ndarray:
        """24 cellar values, ascending."""
        return self._state.cellar_samples

    @property
    def value_chain(self) -> np.ndarray:
        """168 hourly values in slot order (unsorted)."""
        return self._state.value_chain

    @property
    def room_log_values(self) -> np.ndarray:
        return self._state.room_log_values

    @property
    def cellar_log_values(self) -> np.ndarray:
        return self._state.cellar_log_values

    @property
    def room_stats(self) -> SampleStatistics:
        return self._state.room_stats

    @property
    def cellar_stats(self) -> SampleStatistics:
        return self._state.cellar_stats

    # ----- per-field statistics ---------------------------------------

    @property
    def room_average(self) -> float:
        return self._state.room_stats.average

    @property
    def room_maximum(self) -> float:
        return self._state.room_stats.maximum

    @property
    def room_minimum(self) -> float:
        return self._state.room_stats.minimum

    @property
    def room_deviation(self) -> float:
        return self._state.room_stats.deviation

    @property
    def room_var_coefficient(self) -> float:
        return self._state.room_stats.var_coefficient

    @property
    def room_range(self) -> float:
        return self._state.room_stats.range

    @property
    def room_quantile05(self) -> float:
        return self._state.room_stats.quantile05

    @property
    def room_quantile95(self) -> float:
        return self._state.room_stats.quantile95

    @property
    def room_median(self) -> float:
        return self._state.room_stats.median

    @property
    def room_quantile_deviation(self) -> float:
        return self._state.room_stats.quantile_deviation

    @property
    def room_relative_quantile_deviation(self) -> float:
        return self._state.room_stats.relative_quantile_deviation

    @property
    def room_log_average(self) -> float:
        return self._state.room_stats.log_average

    @property
    def room_log_deviation(self) -> float:
        return self._state.room_stats.log_deviation

    @property
    def cellar_average(self) -> float:
        return self._state.cellar_stats.average

    @property
    def cellar_maximum(self) -> float:
        return self._state.cellar_stats.maximum

    @property
    def cellar_minimum(self) -> float:
        return self._state.cellar_stats.minimum

    @property
    def cellar_deviation(self) -> float:
        return self._state.cellar_stats.deviation

    @property
    def cellar_var_coefficient(self) -> float:
        return self._state.cellar_stats.var_coefficient

    @property
    def cellar_range(self) -> float:
        return self._state.cellar_stats.range

    @property
    def cellar_quantile05(self) -> float:
        return self._state.cellar_stats.quantile05

    @property
    def cellar_quantile95(self) -> float:
        return self._state.cellar_stats.quantile95

    @property
    def cellar_median(self) -> float:
        return self._state.cellar_stats.median

    @property
    def cellar_quantile_deviation(self) -> float:
        return self._state.cellar_stats.quantile_deviation

    @property
    def cellar_relative_quantile_deviation(self) -> float:
        return self._state.cellar_stats.relative_quantile_deviation

    @property
    def cellar_log_average(self) -> float:
        return self._state.cellar_stats.log_average

    @property
    def cellar_log_deviation(self) -> float:
        return self._state.cellar_stats.log_deviation

    @property
    def warnings(self) -> list[DegenerateCampaignWarning]:
        return list(self._state.warnings)

    @property
    def degenerate(self) -> bool:
        return self._state.campaign_type.degenerate

    # ----- comparison / rendering --------------------------------------

    def _key(self):
        s = self._state
        return (s.cellar, s.noise_level, s.rooms, s.start, s.campaign_type)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Campaign):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self) -> str:
        s = self._state
        return (
            f"Campaign(start={s.start}, variation={s.variation!r}, "
            f"noise_level={s.noise_level}, type={s.campaign_type.label})"
        )

    def __str__(self) -> str:
        r, c = self._state.room_stats, self._state.cellar_stats
        return (
            f"Campaign: T={self.start},\tR={self.variation},"
            f"\tR_AM={_trunc(r.average)},\tR_GM={_trunc(r.log_average)},"
            f"\tR_Q50={_trunc(r.median)},\tR_MAX={_trunc(r.maximum)},"
            f"\tC_AM={_trunc(c.average)},\tC_GM={_trunc(c.log_average)},"
            f"\tC_Q50={_trunc(c.median)},\tC_MAX={_trunc(c.maximum)}"
        )

    def to_dict(self) -> dict:
        """Flat record of inputs and both statistics blocks."""
        s = self._state
        out = {
            "start": s.start,
            "variation": s.variation,
            "noise_level": s.noise_level,
            "campaign_type": s.campaign_type.label,
            "cellar_slot": s.cellar_slot,
            "cellar": s.cellar.id,
            "rooms": [r.id for r in s.rooms],
        }
        for k, v in s.room_stats.to_dict().items():
            out[f"room_{k}"] = v
        for k, v in s.cellar_stats.to_dict().items():
            out[f"cellar_{k}"] = v
        return out


def _trunc(x: float):
    # int() toward zero; NaN/Inf are printed as-is
    return int(x) if math.isfinite(x) else x


class CampaignBuilder:
    """Factory used by simulation drivers to construct many campaigns.

    Each constructed campaign receives an independent child generator spawned
    from the config's seed sequence, so a seeded builder reproduces the same
    noise for the same construction order.  Use one builder per worker.
    """

    def __init__(self, config: Optional[CampaignConfig] = None):
        self.config = config if config is not None else CampaignConfig()

    def construct(self, start: int, assignment: Sequence[Room], noise_level: int = 0) -> Campaign:
        rng = self.config.spawn_rng()
        return Campaign(start, assignment, noise_level, config=self.config, rng=rng)

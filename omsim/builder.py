"""Campaign construction: slot partition, window arithmetic, noise and chain assembly.

A campaign samples one day (24 h) per slot of a seven-slot "6+1" protocol.
The six room windows are read back to back from ``start``; a room window
that would begin exactly at the cellar marker offset is pushed back one day.
The cellar window itself begins at ``start + slot * cellar_slot_hours``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence, Tuple
import logging
import numpy as np

from .rooms import Room, RoomKind
from .stats import SampleStatistics, describe, log_values

logger = logging.getLogger(__name__)

DAY_HOURS = 24
ROOM_SLOTS = 6
SLOTS = ROOM_SLOTS + 1
ROOM_HOURS = ROOM_SLOTS * DAY_HOURS    # 144
CHAIN_HOURS = SLOTS * DAY_HOURS        # 168


class CampaignType(IntEnum):
    """Number of adjacent room slots that differ, plus one."""

    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def degenerate(self) -> bool:
        return self < CampaignType.THREE


class CampaignValidationError(ValueError):
    """Raised when campaign inputs violate the 6+1 protocol."""


class DegenerateCampaignWarning(UserWarning):
    """Data-quality signal: fewer than three adjacency-distinct rooms."""

    def __init__(self, campaign_type: CampaignType, variation: str, start: int):
        self.campaign_type = campaign_type
        self.variation = variation
        self.start = start
        super().__init__(
            f"Campaign T={start} R={variation} is type {campaign_type.label}: "
            "at least 3 different rooms are needed for a meaningful campaign"
        )

    def __reduce__(self):
        return (type(self), (self.campaign_type, self.variation, self.start))


@dataclass(frozen=True)
class CampaignState:
    """Everything derived from one (start, assignment, noise) triple."""

    start: int
    assignment: Tuple[Room, ...]
    noise_level: int
    rooms: Tuple[Room, ...]
    cellar: Room
    cellar_slot: int
    variation: str
    campaign_type: CampaignType
    room_samples: np.ndarray = field(repr=False)
    cellar_samples: np.ndarray = field(repr=False)
    value_chain: np.ndarray = field(repr=False)
    room_log_values: np.ndarray = field(repr=False)
    cellar_log_values: np.ndarray = field(repr=False)
    room_stats: SampleStatistics = field(repr=False)
    cellar_stats: SampleStatistics = field(repr=False)
    warnings: Tuple[DegenerateCampaignWarning, ...] = ()


def _non_negative_int(value, what: str) -> int:
    if isinstance(value, bool):
        raise CampaignValidationError(f"{what} must be a non-negative integer, got {value!r}")
    try:
        ok = int(value) == value and value >= 0
    except (TypeError, ValueError, OverflowError):
        ok = False
    if not ok:
        raise CampaignValidationError(f"{what} must be a non-negative integer, got {value!r}")
    return int(value)


def validate_start(start) -> int:
    return _non_negative_int(start, "start hour offset")


def validate_noise_level(noise_level) -> int:
    return _non_negative_int(noise_level, "noise level percent")


def variation_of(assignment: Sequence[Room]) -> str:
    """Concatenate the slot ids in assignment order, e.g. ``R1R2C1R3R4R5R6``."""
    return "".join(r.id for r in assignment)


def partition_assignment(assignment: Sequence[Room]) -> Tuple[Tuple[Room, ...], Room, int]:
    """Split seven slots into ``(rooms, cellar, cellar_slot)``.

    Rooms keep their relative slot order.  Raises
    :class:`CampaignValidationError` unless there are exactly seven slots with
    one cellar and six rooms.
    """
    slots = tuple(assignment)
    if len(slots) != SLOTS:
        raise CampaignValidationError(f"wrong room count: {SLOTS} slots are needed, got {len(slots)}")
    for i, r in enumerate(slots):
        if not isinstance(r, Room):
            raise CampaignValidationError(f"slot {i} is not a Room: {r!r}")
    cellar_idx = [i for i, r in enumerate(slots) if r.kind is RoomKind.CELLAR]
    if len(cellar_idx) != 1:
        raise CampaignValidationError(f"exactly one cellar is needed, got {len(cellar_idx)}")
    rooms = tuple(r for r in slots if r.kind is not RoomKind.CELLAR)
    odd = [r.id for r in rooms if r.kind is not RoomKind.ROOM]
    if odd:
        raise CampaignValidationError(f"non-cellar slots must be rooms; got {odd}")
    return rooms, slots[cellar_idx[0]], cellar_idx[0]


def classify_type(rooms: Sequence[Room]) -> CampaignType:
    """Fold the five adjacent-slot comparisons into a :class:`CampaignType`.

    Only neighbours are compared: ``[1, 2, 1, 2, 1, 2]`` is type Six although
    only two distinct rooms are used.
    """
    ids = [r.id for r in rooms]
    if len(ids) != ROOM_SLOTS:
        raise CampaignValidationError(f"wrong room count: {ROOM_SLOTS} rooms are needed, got {len(ids)}")
    differs = [a != b for a, b in zip(ids, ids[1:])]
    return CampaignType(1 + sum(differs))


def cellar_window_start(start: int, cellar_slot: int, cellar_slot_hours: int = 12) -> int:
    return start + cellar_slot * cellar_slot_hours


def apply_noise(values: np.ndarray, noise_level: int, rng: np.random.Generator) -> np.ndarray:
    """Return ``v + v*r`` with ``r ~ U[-noise/100, +noise/100)`` drawn per sample."""
    out = np.array(values, dtype=float, copy=True)
    if noise_level <= 0:
        return out
    f = noise_level / 100.0
    r = rng.uniform(-f, f, size=out.size)
    return out + out * r


def _read(room: Room, start: int) -> np.ndarray:
    try:
        return room.window(start, DAY_HOURS)
    except IndexError as e:
        raise CampaignValidationError(
            f"room {room.id!r} series too short: need {start + DAY_HOURS} hourly values, "
            f"have {len(room)}"
        ) from e


def extract_room_samples(
    rooms: Sequence[Room],
    start: int,
    cellar_start: int,
    noise_level: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Read one day per room slot, back to back, skipping the cellar marker offset."""
    chunks = []
    cursor = start
    for room in rooms:
        if cursor == cellar_start:
            cursor += DAY_HOURS
        chunks.append(apply_noise(_read(room, cursor), noise_level, rng))
        cursor += DAY_HOURS
    return np.concatenate(chunks)


def extract_cellar_samples(
    cellar: Room,
    cellar_start: int,
    noise_level: int,
    rng: np.random.Generator,
) -> np.ndarray:
    return apply_noise(_read(cellar, cellar_start), noise_level, rng)


def assemble_value_chain(
    assignment: Sequence[Room],
    room_samples: np.ndarray,
    cellar_samples: np.ndarray,
) -> np.ndarray:
    """Interleave the unsorted sample buffers into the 168 h week, slot by slot."""
    chain = np.empty(len(assignment) * DAY_HOURS, dtype=float)
    r = c = 0
    for i, slot in enumerate(assignment):
        a = i * DAY_HOURS
        if slot.kind is RoomKind.ROOM:
            chain[a:a + DAY_HOURS] = room_samples[r:r + DAY_HOURS]
            r += DAY_HOURS
        else:
            chain[a:a + DAY_HOURS] = cellar_samples[c:c + DAY_HOURS]
            c += DAY_HOURS
    return chain


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def compute_state(
    start: int,
    assignment: Sequence[Room],
    noise_level: int,
    *,
    rng: np.random.Generator,
    cellar_slot_hours: int = 12,
    warn_degenerate: bool = True,
) -> CampaignState:
    """Run the full construction pipeline and return a new immutable state.

    Nothing is shared with any previous state, so a failure part way leaves
    the caller's current state untouched.
    """
    start = validate_start(start)
    noise_level = validate_noise_level(noise_level)
    rooms, cellar, cellar_slot = partition_assignment(assignment)
    slots = tuple(assignment)
    variation = variation_of(slots)

    ctype = classify_type(rooms)
    warnings: tuple[DegenerateCampaignWarning, ...] = ()
    if ctype.degenerate:
        w = DegenerateCampaignWarning(ctype, variation, start)
        warnings = (w,)
        if warn_degenerate:
            logger.warning("%s", w)

    cellar_start = cellar_window_start(start, cellar_slot, cellar_slot_hours)
    room_samples = extract_room_samples(rooms, start, cellar_start, noise_level, rng)
    cellar_samples = extract_cellar_samples(cellar, cellar_start, noise_level, rng)

    # chain must see extraction order, so it is built before sorting
    chain = assemble_value_chain(slots, room_samples, cellar_samples)
    room_samples.sort()
    cellar_samples.sort()

    state = CampaignState(
        start=start,
        assignment=slots,
        noise_level=noise_level,
        rooms=rooms,
        cellar=cellar,
        cellar_slot=cellar_slot,
        variation=variation,
        campaign_type=ctype,
        room_samples=_frozen(room_samples),
        cellar_samples=_frozen(cellar_samples),
        value_chain=_frozen(chain),
        room_log_values=_frozen(log_values(room_samples)),
        cellar_log_values=_frozen(log_values(cellar_samples)),
        room_stats=describe(room_samples),
        cellar_stats=describe(cellar_samples),
        warnings=warnings,
    )
    logger.debug("Built campaign T=%d R=%s type=%s noise=%d%%", start, variation, ctype.label, noise_level)
    return state

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import numpy as np
import pandas as pd


class RoomKind(str, Enum):
    """Measurement location kind; the value is the id marker used in variations."""

    ROOM = "R"
    CELLAR = "C"
    MISC = "M"


def kind_from_id(room_id: str) -> RoomKind:
    """Infer the kind from the id prefix (``C1`` -> cellar, ``M2`` -> misc)."""
    head = str(room_id)[:1].upper()
    if head == RoomKind.CELLAR.value:
        return RoomKind.CELLAR
    if head == RoomKind.MISC.value:
        return RoomKind.MISC
    return RoomKind.ROOM


@dataclass(frozen=True)
class Room:
    """One physical location and its hourly radon concentrations [Bq/m³].

    The series is stored as a read-only float array; campaigns only ever
    slice it.  Equality and hashing use ``id`` and ``kind``.
    """

    id: str
    kind: RoomKind = RoomKind.ROOM
    series: np.ndarray = field(default_factory=lambda: np.empty(0), compare=False, repr=False)

    def __post_init__(self):
        arr = np.array(self.series, dtype=float, copy=True)
        if arr.ndim != 1:
            raise ValueError(f"Room {self.id!r}: series must be one-dimensional")
        arr.setflags(write=False)
        object.__setattr__(self, "series", arr)
        object.__setattr__(self, "kind", RoomKind(self.kind))

    def __len__(self) -> int:
        return int(self.series.size)

    def __str__(self) -> str:
        return self.id

    def window(self, start: int, hours: int) -> np.ndarray:
        """Return ``hours`` consecutive values beginning at ``start``."""
        stop = start + hours
        if start < 0 or stop > self.series.size:
            raise IndexError(
                f"Room {self.id!r} has {self.series.size} hourly values; "
                f"window [{start}, {stop}) is out of range"
            )
        return self.series[start:stop]


def rooms_from_frame(df: pd.DataFrame, *, columns: list[str] | None = None) -> dict[str, Room]:
    """Build rooms from an already-parsed hourly table.

    Each column is one room; the column name is the room id and determines
    the kind via :func:`kind_from_id`.  Non-numeric cells become NaN.
    """
    cols = list(columns) if columns is not None else [str(c) for c in df.columns]
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Columns not found in series table: {missing}")
    out: dict[str, Room] = {}
    for c in cols:
        values = pd.to_numeric(df[c], errors="coerce").to_numpy(float)
        out[str(c)] = Room(id=str(c), kind=kind_from_id(c), series=values)
    return out

from __future__ import annotations

import numpy as np
import pytest

from omsim.rooms import Room, RoomKind

HOURS = 240


def make_room(room_id: str, base: float, kind: RoomKind | None = None, hours: int = HOURS) -> Room:
    """Room whose value at hour ``h`` is ``base + h``, so a sample tells where it came from."""
    kind = kind if kind is not None else (RoomKind.CELLAR if room_id.startswith("C") else RoomKind.ROOM)
    return Room(room_id, kind, base + np.arange(hours, dtype=float))


@pytest.fixture
def rooms():
    out = {f"R{k}": make_room(f"R{k}", 1000.0 * k) for k in range(1, 7)}
    out["C1"] = make_room("C1", 9000.0)
    return out


@pytest.fixture
def assignment(rooms):
    """Cellar in slot 2: R1 R2 C1 R3 R4 R5 R6."""
    return [rooms[i] for i in ["R1", "R2", "C1", "R3", "R4", "R5", "R6"]]

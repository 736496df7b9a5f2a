from __future__ import annotations

from typing import Iterable, Union
import pandas as pd

from .campaign import Campaign

_TYPE_ORDER = ["Six", "Five", "Four", "Three", "Two", "One"]


def campaigns_to_frame(campaigns: Iterable[Campaign]) -> pd.DataFrame:
    """One row per campaign with inputs and both statistics blocks."""
    rows = []
    for c in campaigns:
        row = c.to_dict()
        row["rooms"] = ",".join(row["rooms"])
        rows.append(row)
    return pd.DataFrame(rows)


def rank_campaigns(
    campaigns: Union[Iterable[Campaign], pd.DataFrame],
    by: str = "room_average",
    ascending: bool = False,
) -> pd.DataFrame:
    """Sort campaigns by one statistic and add a 1-based ``rank`` column.

    Ties share the lowest rank (``method="min"``); NaN values rank last.
    """
    df = campaigns if isinstance(campaigns, pd.DataFrame) else campaigns_to_frame(campaigns)
    if df.empty:
        return df.assign(rank=pd.Series(dtype=int))
    if by not in df.columns:
        raise ValueError(f"Unknown ranking column {by!r}")
    out = df.sort_values(by, ascending=ascending, na_position="last", kind="mergesort").copy()
    out["rank"] = out[by].rank(method="min", ascending=ascending, na_option="bottom").astype(int)
    return out.reset_index(drop=True)


def summarize_by_type(frame: pd.DataFrame) -> pd.DataFrame:
    """Count and spread of the room/cellar means per campaign type."""
    cols = ["room_average", "cellar_average"]
    missing = [c for c in ["campaign_type", *cols] if c not in frame.columns]
    if missing:
        raise ValueError(f"Frame lacks columns {missing}")
    g = frame.groupby("campaign_type")[cols].agg(["count", "mean", "min", "max"])
    g.columns = [f"{a}_{b}" for a, b in g.columns]
    order = [t for t in _TYPE_ORDER if t in g.index]
    return g.loc[order].reset_index()


from __future__ import annotations
import argparse, json, logging
from pathlib import Path
import numpy as np
import pandas as pd
from .builder import CampaignValidationError
from .campaign import Campaign
from .config import load_config
from .rooms import rooms_from_frame
from .stats import describe

logger = logging.getLogger(__name__)


def build_parser():
    p = argparse.ArgumentParser(prog="omsim", description="6+1 radon campaign simulation")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("campaign", help="Build one synthetic campaign from hourly room series")
    c.add_argument("--series", required=True, type=Path,
                   help="CSV with one column of hourly Bq/m³ values per room (column name = room id)")
    c.add_argument("--rooms", required=True,
                   help="Seven comma-separated room ids in slot order, e.g. R1,R2,C1,R3,R4,R5,R6")
    c.add_argument("--start", type=int, default=0, help="Hour offset into the series")
    c.add_argument("--noise", type=int, default=0, help="Random noise in percent (0 = none)")
    c.add_argument("--seed", type=int, default=None, help="Seed for the noise generator")
    c.add_argument("--config", type=Path, default=None, help="JSON file with CampaignConfig fields")
    c.add_argument("--json-out", type=Path, default=None, help="Optional path to write the campaign as JSON")
    c.add_argument("--summary", action="store_true", help="Print the one-line summary instead of JSON")

    d = sub.add_parser("describe", help="Descriptive statistics of whole room series")
    d.add_argument("--series", required=True, type=Path)
    d.add_argument("--room", action="append", default=None, help="Room id (repeatable); default all columns")
    return p


def _load_rooms(path: Path, ids: list[str] | None = None):
    df = pd.read_csv(path)
    try:
        return rooms_from_frame(df, columns=ids)
    except ValueError as e:
        raise SystemExit(str(e))


def _campaign(a) -> dict:
    cfg = load_config(a.config)
    if a.seed is not None:
        cfg.seed = a.seed
    ids = [s.strip() for s in a.rooms.split(",") if s.strip()]
    rooms = _load_rooms(a.series, sorted(set(ids)))
    try:
        camp = Campaign(a.start, [rooms[i] for i in ids], a.noise, config=cfg)
    except CampaignValidationError as e:
        raise SystemExit(f"Invalid campaign: {e}")
    res = camp.to_dict()
    res["warnings"] = [str(w) for w in camp.warnings]
    res["value_chain"] = camp.value_chain.tolist()
    if a.json_out:
        a.json_out.parent.mkdir(parents=True, exist_ok=True)
        with open(a.json_out, "w") as fh:
            json.dump(res, fh, indent=2)
    if a.summary:
        print(str(camp))
    else:
        print(json.dumps(res, indent=2))
    return res


def _describe(a) -> dict:
    rooms = _load_rooms(a.series, a.room)
    res = {}
    for rid, room in rooms.items():
        vals = np.sort(room.series[~np.isnan(room.series)])
        if vals.size == 0:
            logger.warning("Room %s has no numeric values; skipped", rid)
            continue
        try:
            stats = describe(vals)
        except ValueError as e:
            logger.warning("Room %s skipped: %s", rid, e)
            continue
        res[rid] = {"kind": room.kind.name.lower(), "n": int(vals.size), **stats.to_dict()}
    print(json.dumps(res, indent=2))
    return res


def main(argv=None):
    ap = build_parser()
    a = ap.parse_args(argv)
    logging.basicConfig(level=getattr(logging, a.log_level),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    if a.cmd == "campaign":
        return _campaign(a)
    elif a.cmd == "describe":
        return _describe(a)

if __name__ == "__main__":
    main()

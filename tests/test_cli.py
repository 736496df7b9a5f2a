import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from omsim import cli


def _write_series(tmp_path: Path) -> Path:
    hours = np.arange(240, dtype=float)
    df = pd.DataFrame({f"R{k}": 100.0 * k + hours for k in range(1, 7)})
    df["C1"] = 900.0 + hours
    p = tmp_path / "hourly.csv"
    df.to_csv(p, index=False)
    return p


def test_cli_campaign_json(tmp_path: Path, capsys):
    csv = _write_series(tmp_path)
    out = tmp_path / "out" / "campaign.json"
    args = [
        "campaign",
        "--series", str(csv),
        "--rooms", "R1,R2,C1,R3,R4,R5,R6",
        "--start", "0",
        "--json-out", str(out),
    ]
    cli.main(args)
    data = json.loads(capsys.readouterr().out)
    assert out.exists()
    assert data["variation"] == "R1R2C1R3R4R5R6"
    assert data["campaign_type"] == "Six"
    assert len(data["value_chain"]) == 168
    assert data["cellar_minimum"] == 924.0
    assert data["warnings"] == []


def test_cli_campaign_summary_with_noise(tmp_path: Path, capsys):
    csv = _write_series(tmp_path)
    cli.main(["campaign", "--series", str(csv), "--rooms", "R1,R2,C1,R3,R4,R5,R6",
              "--noise", "5", "--seed", "1", "--summary"])
    line = capsys.readouterr().out.strip()
    assert line.startswith("Campaign: T=0,\tR=R1R2C1R3R4R5R6,")


def test_cli_campaign_config(tmp_path: Path, capsys):
    csv = _write_series(tmp_path)
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"cellar_slot_hours": 24}))
    cli.main(["campaign", "--series", str(csv), "--rooms", "R1,C1,R2,R3,R4,R5,R6",
              "--config", str(cfg)])
    data = json.loads(capsys.readouterr().out)
    assert data["cellar_minimum"] == 924.0


def test_cli_campaign_invalid(tmp_path: Path):
    csv = _write_series(tmp_path)
    with pytest.raises(SystemExit, match="Invalid campaign"):
        cli.main(["campaign", "--series", str(csv), "--rooms", "R1,R2,R3,R4,R5,R6"])
    with pytest.raises(SystemExit, match="not found"):
        cli.main(["campaign", "--series", str(csv), "--rooms", "R1,R2,C9,R3,R4,R5,R6"])


def test_cli_describe(tmp_path: Path, capsys):
    csv = _write_series(tmp_path)
    cli.main(["describe", "--series", str(csv), "--room", "R1", "--room", "C1"])
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"R1", "C1"}
    assert data["C1"]["kind"] == "cellar"
    assert data["R1"]["n"] == 240
    assert data["R1"]["minimum"] == 100.0


def test_cli_describe_skips_short_room(tmp_path: Path, capsys, caplog):
    df = pd.DataFrame({"R1": 100.0 + np.arange(40.0), "R2": np.nan})
    df.loc[:9, "R2"] = 200.0 + np.arange(10.0)
    csv = tmp_path / "short.csv"
    df.to_csv(csv, index=False)
    cli.main(["describe", "--series", str(csv)])
    data = json.loads(capsys.readouterr().out)
    assert set(data) == {"R1"}
    assert "Room R2 skipped" in caplog.text

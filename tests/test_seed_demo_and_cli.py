from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from hybrec.data import load_raw_data
from hybrec.hybrid import cli
from hybrec.pipelines import seed_demo
from hybrec.pipelines.seed_demo import DEMO_ITEMS, DEMO_USERS, build_demo_data


def test_demo_data_shape_and_reproducibility() -> None:
    a = build_demo_data(seed=1)
    b = build_demo_data(seed=1)

    assert len(a.users) == len(DEMO_USERS) == 10
    assert len(a.items) == len(DEMO_ITEMS) == 20
    pd.testing.assert_frame_equal(a.ratings, b.ratings)
    assert a.users["id"].is_unique
    assert a.ratings["rating"].between(1, 5).all()
    assert not a.ratings.duplicated(subset=["userId", "itemId"]).any()


def test_demo_rate_prob_extremes() -> None:
    assert len(build_demo_data(rate_prob=1.0).ratings) == 200
    assert len(build_demo_data(rate_prob=0.0).ratings) == 0
    with pytest.raises(ValueError):
        build_demo_data(rate_prob=1.5)


@pytest.fixture()
def demo_dir(tmp_path: Path) -> Path:
    out = tmp_path / "raw"
    seed_demo.main(["--out-dir", str(out), "--seed", "3"])
    return out


def test_seed_demo_main_writes_csvs(demo_dir: Path) -> None:
    data = load_raw_data(demo_dir)
    assert len(data.users) == 10
    assert len(data.items) == 20


def test_cli_prints_recommendations_and_similar_items(demo_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    data = load_raw_data(demo_dir)
    user_id = str(data.users["id"].iloc[0])

    code = cli.main(
        [
            "--user-id",
            user_id,
            "--k",
            "3",
            "--rank",
            "full",
            "--raw-dir",
            str(demo_dir),
            "--similar-to",
            "the matrix",
            "--sequential",
        ]
    )
    out = capsys.readouterr().out

    assert code == 0
    assert "=== Recommended Items ===" in out
    assert "=== Items Similar To 'The Matrix' ===" in out


def test_cli_unknown_user_exits_with_error(demo_dir: Path) -> None:
    assert cli.main(["--user-id", "nobody", "--raw-dir", str(demo_dir)]) == 2


def test_cli_missing_explicit_config_raises(demo_dir: Path, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cli.main(["--user-id", "x", "--raw-dir", str(demo_dir), "--config", str(tmp_path / "nope.yaml")])

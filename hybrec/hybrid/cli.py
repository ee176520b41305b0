"""Command-line front end for the hybrid recommender.

Loads users/items/ratings CSVs, recommends unrated items for one user and
optionally lists the items most similar to a given title.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

import pandas as pd

from ..data import load_raw_data
from ..paths import ProjectPaths, get_repo_root
from ..store.catalog import ItemCatalog
from ..utils import setup_logging
from .config import hybrid_config_from_mapping, load_yaml_config, parse_optional_int
from .errors import HybridRecError
from .recommender import HybridRecommender, InMemoryRatingsSource


logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Hybrid SVD + item-similarity recommendations")
    p.add_argument("--user-id", type=str, required=True, help="User id (from users.csv)")
    p.add_argument("--k", type=int, default=None, help="How many recommendations to return")
    p.add_argument("--rank", type=str, default=None, help="SVD rank to keep, or 'full'")
    p.add_argument("--similar-to", type=str, default=None, help="Also list items similar to this title")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    p.add_argument("--raw-dir", type=Path, default=None, help="Directory with users/items/ratings CSVs")
    p.add_argument("--sequential", action="store_true", help="Do not run SVD and similarity concurrently")
    p.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    return p


def _with_titles(recs: list, catalog: ItemCatalog) -> pd.DataFrame:
    rows = []
    for r in recs:
        fields = catalog.get_display_fields(r.itemId) if catalog.has_item(r.itemId) else {"itemId": r.itemId}
        fields["score"] = float(r.score)
        rows.append(fields)
    return pd.DataFrame(rows)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    repo_root = get_repo_root()
    config_path = Path(args.config) if args.config is not None else (repo_root / "config.yaml")
    if not config_path.is_absolute():
        config_path = (repo_root / config_path).resolve()

    # Only the implicit repo-root config may be absent.
    cfg_yaml = load_yaml_config(config_path) if (args.config is not None or config_path.exists()) else {}
    hybrid_raw = cfg_yaml.get("hybrid", {}) if isinstance(cfg_yaml.get("hybrid"), dict) else {}
    cfg = hybrid_config_from_mapping(hybrid_raw)
    if args.rank is not None:
        # "full" maps to None, which with_overrides would skip.
        cfg = replace(cfg, svd_rank=parse_optional_int(args.rank))
    cfg = cfg.with_overrides(top_n=args.k, parallel=(False if args.sequential else None))

    dataset_cfg = cfg_yaml.get("dataset", {}) if isinstance(cfg_yaml.get("dataset"), dict) else {}
    raw_dir = Path(args.raw_dir) if args.raw_dir is not None else Path(str(dataset_cfg.get("raw_dir", "data/raw")))
    paths = ProjectPaths.from_repo_root(repo_root, raw_dir=raw_dir)

    data = load_raw_data(paths.raw_dir)
    source = InMemoryRatingsSource.from_frames(data.users, data.items, data.ratings)
    catalog = ItemCatalog.from_frame(data.items)
    rec = HybridRecommender(source, config=cfg)
    logger.info(
        "Loaded users=%d items=%d ratings=%d from %s (svd_rank=%s)",
        len(data.users),
        len(data.items),
        len(data.ratings),
        paths.raw_dir,
        "full" if cfg.svd_rank is None else cfg.svd_rank,
    )

    try:
        recs = rec.recommend(args.user_id)
    except HybridRecError as exc:
        logger.error("%s", exc)
        return 2

    print("\n=== Recommended Items ===")
    if recs:
        print(_with_titles(recs, catalog).to_string(index=False))
    else:
        print("No recommendations found (user has rated every item).")

    if args.similar_to:
        item_id, match = catalog.resolve_title_to_item_id(args.similar_to)
        if item_id is None:
            logger.error("No item title matches %r (best similarity %.2f)", args.similar_to, match)
            return 2
        sims = rec.similar_items(item_id)
        title = catalog.get_display_fields(item_id)["title"]
        print(f"\n=== Items Similar To {title!r} ===")
        if sims:
            print(_with_titles(sims, catalog).to_string(index=False))
        else:
            print("No other items in the catalog.")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

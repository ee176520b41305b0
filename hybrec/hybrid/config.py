from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from ..paths import get_repo_root


@dataclass(frozen=True)
class HybridConfig:
    """Runtime knobs of the hybrid recommender.

    svd_rank:
        Number of singular components kept by the low-rank approximation.
        `None` keeps all of them, which reconstructs the rating matrix exactly
        and leaves the neighbourhood term as the only generalising signal.
    base_weight / neighbor_weight:
        Blend of the predicted rating and the similarity-weighted neighbourhood
        average. Only applied when the user has rated at least one item.
    max_users / max_items:
        Upper bounds on the matrix dimensions checked before any decomposition.
        `None` disables a bound.
    parallel:
        Run factorization and similarity concurrently on two threads.
    """

    svd_rank: int | None = 10
    base_weight: float = 0.7
    neighbor_weight: float = 0.3
    top_n: int = 10
    max_users: int | None = 5000
    max_items: int | None = 5000
    parallel: bool = True

    def __post_init__(self) -> None:
        if self.svd_rank is not None and int(self.svd_rank) < 1:
            raise ValueError(f"svd_rank must be >= 1 or None, got {self.svd_rank}")
        for name in ("base_weight", "neighbor_weight"):
            w = float(getattr(self, name))
            if not math.isfinite(w) or w < 0.0:
                raise ValueError(f"{name} must be a finite, non-negative number, got {w}")
        if int(self.top_n) < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")
        for name in ("max_users", "max_items"):
            bound = getattr(self, name)
            if bound is not None and int(bound) < 0:
                raise ValueError(f"{name} must be >= 0 or None, got {bound}")

    def with_overrides(self, **overrides: Any) -> "HybridConfig":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown HybridConfig fields: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def parse_optional_int(raw: Any) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, str) and raw.strip().lower() in ("", "none", "full", "null"):
        return None
    return int(raw)


def hybrid_config_from_mapping(raw: dict[str, Any]) -> HybridConfig:
    """Build a HybridConfig from the `hybrid:` section of config.yaml."""
    defaults = HybridConfig()
    return HybridConfig(
        svd_rank=parse_optional_int(raw.get("svd_rank", defaults.svd_rank)),
        base_weight=float(raw.get("base_weight", defaults.base_weight)),
        neighbor_weight=float(raw.get("neighbor_weight", defaults.neighbor_weight)),
        top_n=int(raw.get("top_n", defaults.top_n)),
        max_users=parse_optional_int(raw.get("max_users", defaults.max_users)),
        max_items=parse_optional_int(raw.get("max_items", defaults.max_items)),
        parallel=bool(raw.get("parallel", defaults.parallel)),
    )


def load_yaml_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config.yaml (defaults to the one at the repo root)."""
    path = Path(config_path) if config_path is not None else (get_repo_root() / "config.yaml")
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    obj = yaml.safe_load(path.read_text())
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"Expected YAML mapping at {path}, got {type(obj)}")
    return obj


def load_hybrid_config(config_path: Path | None = None) -> HybridConfig:
    """Read the `hybrid:` section; a missing section yields the defaults."""
    cfg_yaml = load_yaml_config(config_path)
    hybrid_raw = cfg_yaml.get("hybrid", {}) if isinstance(cfg_yaml.get("hybrid"), dict) else {}
    return hybrid_config_from_mapping(hybrid_raw)

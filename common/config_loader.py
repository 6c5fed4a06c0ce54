from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import yaml

DEFAULT_POLICY_PATH = "config/policy.yaml"
DEFAULT_HOLDINGS_PATH = "config/holdings.yaml"
DEFAULT_CLASSIFICATIONS_PATH = "data/classified.csv"

def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

@dataclass(frozen=True)
class LoadedConfig:
    policy: Dict[str, Any]
    holdings_path: Path
    classifications_path: Path | None

def load_all(
    policy_path: str = DEFAULT_POLICY_PATH,
    holdings_path: str = DEFAULT_HOLDINGS_PATH,
    classifications_path: str | None = DEFAULT_CLASSIFICATIONS_PATH,
) -> LoadedConfig:
    cls_path = Path(classifications_path) if classifications_path else None
    if cls_path is not None and not cls_path.exists():
        cls_path = None
    return LoadedConfig(
        policy=load_yaml(policy_path),
        holdings_path=Path(holdings_path),
        classifications_path=cls_path,
    )

# chrysalis/config.py
from dataclasses import dataclass, field
from typing import Dict, Optional
import os
import tomllib  # python >=3.11

from loguru import logger

# Material weights used by the evaluator
PIECE_VALUES = {
    "KING": 5000,
    "QUEEN": 900,
    "ROOK": 500,
    "BISHOP": 330,
    "KNIGHT": 320,
    "PAWN": 100,
}

LEVELS = ("easy", "medium", "hard")

@dataclass
class SearchConfig:
    depth: int = 1  # reply plies searched below each candidate at "hard"
    level: str = "medium"
    mode: str = "human"  # "human" (hot-seat) or "cpu"
    cpu_plays: str = "black"
    seed: Optional[int] = None  # fixes the "easy" picks when set

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    zone_bonus: int = 4
    mobility_weight: float = 0.5
    win_score: float = 1e9

@dataclass
class UIConfig:
    engine_name: str = "Chrysalis"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            if section in raw:
                target = getattr(cfg, section)
                for k, v in raw[section].items():
                    if hasattr(target, k):
                        setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHRYSALIS_CONFIG_TOML", "config.toml"))
# env overrides for quick debugging
override_depth = os.environ.get("CHRYSALIS_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logger.warning("Ignoring CHRYSALIS_SEARCH_DEPTH={!r}: not an integer", override_depth)
override_level = os.environ.get("CHRYSALIS_AI_LEVEL")
if override_level:
    if override_level.lower() in LEVELS:
        CONFIG.search.level = override_level.lower()
    else:
        logger.warning("Ignoring CHRYSALIS_AI_LEVEL={!r}: expected one of {}", override_level, LEVELS)

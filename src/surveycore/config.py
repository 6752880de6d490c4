from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_int(key: str, default: int) -> int:
    v = _env_str(key)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    v = _env_str(key)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Logic engine used when a survey carries no version flag
    default_logic_engine: str = "logicEngineV2"

    # Scoring engine used when a survey carries no engine id
    default_scoring_engine: str = "engagement_v1"

    # Weight distribution checks
    min_questions_for_weight_check: int = 3
    weight_dominance_percent: float = 50.0
    weight_variance_ratio: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @staticmethod
    def from_env() -> "Settings":
        # Read configuration from environment variables.
        # Only the embedding application calls this; the core takes Settings explicitly.
        return Settings(
            default_logic_engine=_env_str("SURVEYCORE_LOGIC_ENGINE", "logicEngineV2") or "logicEngineV2",
            default_scoring_engine=_env_str("SURVEYCORE_SCORING_ENGINE", "engagement_v1") or "engagement_v1",

            min_questions_for_weight_check=_env_int("SURVEYCORE_WEIGHT_MIN_QUESTIONS", 3),
            weight_dominance_percent=_env_float("SURVEYCORE_WEIGHT_DOMINANCE_PERCENT", 50.0),
            weight_variance_ratio=_env_float("SURVEYCORE_WEIGHT_VARIANCE_RATIO", 5.0),

            log_level=_env_str("SURVEYCORE_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool("SURVEYCORE_LOG_JSON", False),
        )


DEFAULT_SETTINGS = Settings()

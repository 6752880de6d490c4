"""
Scoring configuration sanitiser used by the builder before saving.

Unlike the validators, these helpers repair what they can:
    - duplicate or empty category ids are dropped (first one wins)
    - duplicate or empty band ids are dropped (first one wins)
    - inverted band bounds are swapped
    - overlapping bands are trimmed so the earlier band stays intact and
      the later one starts on the next whole number
"""

import math
from dataclasses import replace
from typing import Dict, List, Optional

from surveycore.model import ScoreBand, ScoreCategory, SurveyScoreConfig

MAX_SCORE_WEIGHT = 1000


def _sanitize_categories(categories: List[ScoreCategory]) -> List[ScoreCategory]:
    seen = set()
    kept = []
    for category in categories:
        if not category.id or category.id in seen:
            continue
        seen.add(category.id)
        kept.append(category)
    return kept


def _sanitize_band_group(bands: List[ScoreBand]) -> List[ScoreBand]:
    ordered = sorted(
        (replace(b, min=b.max, max=b.min) if b.min > b.max else b for b in bands),
        key=lambda b: b.min,
    )
    kept: List[ScoreBand] = []
    for band in ordered:
        last = kept[-1] if kept else None
        if last is not None and band.min <= last.max:
            trimmed_min = last.max + 1
            if trimmed_min < band.max:
                kept.append(replace(band, min=trimmed_min))
        else:
            kept.append(band)
    return kept


def sanitize_bands(bands: List[ScoreBand]) -> List[ScoreBand]:
    """Deduplicate, order and de-overlap bands, one category group at a time."""
    seen = set()
    groups: Dict[Optional[str], List[ScoreBand]] = {}
    for band in bands:
        if not band.id or band.id in seen:
            continue
        seen.add(band.id)
        groups.setdefault(band.category or None, []).append(band)

    result: List[ScoreBand] = []
    for group in groups.values():
        result.extend(_sanitize_band_group(group))
    return result


def normalize_score_config(config: Optional[SurveyScoreConfig]) -> Optional[SurveyScoreConfig]:
    """Return a sanitised copy of config; None stays None."""
    if config is None:
        return None
    return SurveyScoreConfig(
        enabled=config.enabled,
        categories=_sanitize_categories(list(config.categories)),
        score_ranges=sanitize_bands(list(config.score_ranges)),
    )


def clamp_score_weight(weight: Optional[float]) -> Optional[float]:
    """Clamp to [0, 1000]; None and non-finite weights become None."""
    if weight is None or not math.isfinite(weight):
        return None
    return max(0, min(weight, MAX_SCORE_WEIGHT))


def sanitize_option_scores(option_scores: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
    if option_scores is None:
        return None
    return {
        key: value if isinstance(value, (int, float)) and math.isfinite(value) else 0
        for key, value in option_scores.items()
    }

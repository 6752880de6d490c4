"""
Band Resolver: maps a percentage onto a labeled score band.

Bands carry an optional category tag:
    - untagged bands form the overall (global) set
    - tagged bands form a per-category set

Resolution returns the first band, in the order given, whose inclusive
[min, max] range holds the percentage.
"""

from typing import Dict, Iterable, List, Optional, Union

from surveycore.model import ScoreBand, ScoringResult, SurveyScoreConfig

BandSource = Union[SurveyScoreConfig, Iterable[ScoreBand], None]


def _bands_of(source: BandSource) -> List[ScoreBand]:
    if source is None:
        return []
    if isinstance(source, SurveyScoreConfig):
        return list(source.score_ranges)
    return list(source)


def global_bands(source: BandSource) -> List[ScoreBand]:
    """Bands without a category tag."""
    return [b for b in _bands_of(source) if not b.category]


def category_bands(source: BandSource, category_id: str) -> List[ScoreBand]:
    """Bands tagged with category_id."""
    return [b for b in _bands_of(source) if b.category == category_id]


def resolve_band(percentage: float, source: BandSource) -> Optional[ScoreBand]:
    """
    Resolve against the global band set.

    Args:
        percentage: Score percentage (0-100)
        source: A SurveyScoreConfig or a sequence of bands

    Returns:
        First matching band, or None
    """
    for band in global_bands(source):
        if band.min <= percentage <= band.max:
            return band
    return None


def resolve_category_band(percentage: float, source: BandSource, category_id: str) -> Optional[ScoreBand]:
    """Resolve against the bands tagged with category_id only."""
    for band in category_bands(source, category_id):
        if band.min <= percentage <= band.max:
            return band
    return None


def resolve_category_bands(result: ScoringResult, source: BandSource) -> Dict[str, Optional[ScoreBand]]:
    """
    Resolve a band for every category in a scoring result.

    A category with its own tagged bands resolves against those.
    Otherwise it falls back to the global bands.
    """
    resolved: Dict[str, Optional[ScoreBand]] = {}
    for category_id, category in result.by_category.items():
        pct = (category.score / category.max_score) * 100 if category.max_score > 0 else 0
        if category_bands(source, category_id):
            resolved[category_id] = resolve_category_band(pct, source, category_id)
        else:
            resolved[category_id] = resolve_band(pct, source)
    return resolved

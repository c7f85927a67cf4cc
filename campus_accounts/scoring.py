"""
Profile completeness score.

Each optional profile field earns a few points depending on how much of it is
filled in, at most 13 points overall. The score is the share of those points,
as a whole percentage rounded half up.
"""

from typing import Optional, Sized
import math

from .domain import Profile

MAX_RAW_SCORE = 13


def _count(value: Optional[Sized]) -> int:
    return len(value) if value else 0


def introduction_score(introduction: Optional[str]) -> int:
    length = _count(introduction)
    score = 0
    if length >= 100:
        score += 1
    if length >= 200:
        score += 1
    if length >= 300:
        score += 2
    return score


def technology_score(count: int) -> int:
    score = 0
    if count >= 1:
        score += 1
    if count >= 2:
        score += 1
    if count >= 5:
        score += 2
    return score


def position_score(count: int) -> int:
    return 1 if count else 0


def list_score(count: int) -> int:
    """Awards and links: one point for one entry, two for more."""
    if not count:
        return 0
    return 2 if count >= 2 else 1


def raw_score(profile: Profile) -> int:
    return (introduction_score(profile.introduction)
            + technology_score(_count(profile.technologies))
            + position_score(_count(profile.positions))
            + list_score(_count(profile.awards))
            + list_score(_count(profile.links)))


def score(profile: Profile) -> int:
    """Get the completeness of ``profile`` as an integer from 0 to 100."""
    return math.floor(raw_score(profile) / MAX_RAW_SCORE * 100 + 0.5)

"""Scoring configuration for Waitlist Core.

Centralizes feature flags, factor weights, normalization bounds and tuning
constants for the patient scoring engine.  All values are loaded from
environment variables with defaults that reproduce the reference scoring
behavior, so the system works out-of-the-box.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Feature flags
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringFeatureFlags:
    """Runtime feature flags for the scoring subsystem."""

    enable_missing_data_noise: bool = field(
        default_factory=lambda: _env_bool("SCORING_ENABLE_MISSING_DATA_NOISE", default=True),
    )
    enable_ranking_logging: bool = field(
        default_factory=lambda: _env_bool("SCORING_ENABLE_RANKING_LOGGING", default=True),
    )


# ---------------------------------------------------------------------------
# Factor weights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringWeights:
    """Weights applied to the normalized factors.  They sum to 1.0."""

    age: float = field(
        default_factory=lambda: _env_float("SCORE_W_AGE", 0.10),
    )
    distance: float = field(
        default_factory=lambda: _env_float("SCORE_W_DISTANCE", 0.10),
    )
    accepted_offers: float = field(
        default_factory=lambda: _env_float("SCORE_W_ACCEPTED_OFFERS", 0.30),
    )
    canceled_offers: float = field(
        default_factory=lambda: _env_float("SCORE_W_CANCELED_OFFERS", 0.30),
    )
    average_reply_time: float = field(
        default_factory=lambda: _env_float("SCORE_W_AVERAGE_REPLY_TIME", 0.20),
    )


# ---------------------------------------------------------------------------
# Normalization bounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NormalizationBounds:
    """(min, max) ranges used to map each raw factor into [0, 1]."""

    age: tuple[float, float] = (0.0, 100.0)
    # Meters.  Beyond 4,500 km every patient is equally far.
    distance: tuple[float, float] = field(
        default_factory=lambda: (0.0, _env_float("SCORE_DISTANCE_CEILING_M", 4_500_000.0)),
    )
    accepted_offers: tuple[float, float] = (0.0, 100.0)
    canceled_offers: tuple[float, float] = (0.0, 100.0)
    # Seconds.
    average_reply_time: tuple[float, float] = (0.0, 3600.0)


# ---------------------------------------------------------------------------
# Scoring tuning
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringTuning:
    """Constants of the combination, noise and rescale steps."""

    # Weighted contribution substituted for a missing behavioral factor.
    missing_behavior_value: float = field(
        default_factory=lambda: _env_float("SCORE_MISSING_BEHAVIOR_VALUE", 0.2),
    )
    # Upper bound of the upward noise when all behavioral fields are missing.
    max_missing_data_noise: float = field(
        default_factory=lambda: _env_float("SCORE_MAX_MISSING_DATA_NOISE", 0.5),
    )
    min_score: float = 1.0
    max_score: float = 10.0
    score_decimals: int = 2
    # WGS-84 equatorial radius, not the mean radius.
    earth_radius_m: float = 6_378_137.0
    distance_accuracy_m: float = field(
        default_factory=lambda: _env_float("SCORE_DISTANCE_ACCURACY_M", 1.0),
    )
    random_seed: Optional[int] = field(
        default_factory=lambda: _env_optional_int("SCORING_RANDOM_SEED"),
    )
    default_limit: int = field(
        default_factory=lambda: _env_int("RANKING_DEFAULT_LIMIT", 10),
    )


# ---------------------------------------------------------------------------
# Singleton instances (importable)
# ---------------------------------------------------------------------------

scoring_feature_flags = ScoringFeatureFlags()
scoring_weights = ScoringWeights()
normalization_bounds = NormalizationBounds()
scoring_tuning = ScoringTuning()

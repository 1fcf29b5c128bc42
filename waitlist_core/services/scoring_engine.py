"""Patient scoring engine.

Computes a 1–10 affinity score for a patient relative to a target location:

1. **Normalize** each factor into [0, 1] (age, distance, accepted offers,
   canceled offers, average reply time).
2. **Combine** the factors with fixed weights; a missing behavioral factor
   contributes the neutral constant instead of its normalized value.
3. **Boost** patients with missing behavioral data by a bounded, upward-only
   random amount proportional to how many fields are missing.
4. **Rescale** the [0, 1] raw score to [1, 10], rounded to two decimals.

The engine is synchronous and side-effect free apart from drawing from its
random source.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from waitlist_core.core.scoring_config import (
    NormalizationBounds,
    ScoringFeatureFlags,
    ScoringTuning,
    ScoringWeights,
    normalization_bounds,
    scoring_feature_flags,
    scoring_tuning,
    scoring_weights,
)
from waitlist_core.schemas.patient import Patient
from waitlist_core.services.geo import distance


class RandomSource(Protocol):
    def random(self) -> float: ...


class InvalidTargetLocation(ValueError):
    def __init__(self, message: str = "Invalid target location") -> None:
        super().__init__(message)


class PatientScoringError(ArithmeticError):
    pass


@dataclass
class FactorBreakdown:
    """Normalized factors of a single patient.  ``None`` marks missing data."""

    age: float
    distance: float
    accepted_offers: Optional[float]
    canceled_offers: Optional[float]
    average_reply_time: Optional[float]

    @property
    def missing(self) -> int:
        return sum(
            value is None
            for value in (self.accepted_offers, self.canceled_offers, self.average_reply_time)
        )


def _clamp(value: float, lower: float, upper: float) -> float:
    # NaN passes through so malformed input surfaces as a scoring fault.
    if math.isnan(value):
        return value
    return max(lower, min(upper, value))


def normalize(value: Optional[float], min_value: float, max_value: float) -> float:
    """Linearly map ``value`` into [0, 1]; ``None`` means "no information" (0.5)."""
    if value is None:
        return 0.5
    return _clamp((value - min_value) / (max_value - min_value), 0.0, 1.0)


def _coordinate(target: Any, name: str) -> Any:
    if isinstance(target, dict):
        return target.get(name)
    return getattr(target, name, None)


def validate_target(target: Any) -> None:
    """Reject an absent target or one missing a coordinate.

    Only ``None`` counts as missing: a target on the equator or the prime
    meridian (coordinate ``0``) is valid.
    """
    if target is None:
        raise InvalidTargetLocation()
    if _coordinate(target, "latitude") is None or _coordinate(target, "longitude") is None:
        raise InvalidTargetLocation()


class PatientScoringEngine:
    """Weighted, normalized multi-factor scoring of waitlisted patients."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        weights: Optional[ScoringWeights] = None,
        bounds: Optional[NormalizationBounds] = None,
        tuning: Optional[ScoringTuning] = None,
        flags: Optional[ScoringFeatureFlags] = None,
    ) -> None:
        self._weights = weights or scoring_weights
        self._bounds = bounds or normalization_bounds
        self._tuning = tuning or scoring_tuning
        self._flags = flags or scoring_feature_flags
        self._rng = rng if rng is not None else random.Random(self._tuning.random_seed)

    def compute_score(self, patient: Patient, target: Any) -> float:
        """Score ``patient`` against ``target`` on the 1–10 scale.

        Raises ``InvalidTargetLocation`` for a missing target or coordinate.
        A direct call also raises ``PatientScoringError`` when malformed patient
        data (e.g. non-finite coordinates) yields a non-finite raw score;
        ranking absorbs that error as the minimum score.
        """
        validate_target(target)

        factors = self.factors(patient, target)
        raw = self.weighted_sum(factors)
        raw = self.apply_missing_data_noise(raw, factors.missing)
        if not math.isfinite(raw):
            raise PatientScoringError(f"non-finite raw score for patient {patient.id}")

        return self.rescale(raw)

    def factors(self, patient: Patient, target: Any) -> FactorBreakdown:
        b = self._bounds
        meters = distance(patient.location, target, earth_radius=self._tuning.earth_radius_m)

        # Presence is "is not None": zero offers is real data, not a missing value.
        accepted = (
            normalize(patient.accepted_offers, *b.accepted_offers)
            if patient.accepted_offers is not None
            else None
        )
        canceled = (
            1 - normalize(patient.canceled_offers, *b.canceled_offers)
            if patient.canceled_offers is not None
            else None
        )
        reply_time = (
            1 - normalize(patient.average_reply_time, *b.average_reply_time)
            if patient.average_reply_time is not None
            else None
        )

        return FactorBreakdown(
            age=normalize(patient.age, *b.age),
            distance=1 - normalize(meters, *b.distance),
            accepted_offers=accepted,
            canceled_offers=canceled,
            average_reply_time=reply_time,
        )

    def weighted_sum(self, factors: FactorBreakdown) -> float:
        w = self._weights
        neutral = self._tuning.missing_behavior_value

        def behavior(value: Optional[float]) -> float:
            return neutral if value is None else value

        return (
            factors.age * w.age
            + factors.distance * w.distance
            + behavior(factors.accepted_offers) * w.accepted_offers
            + behavior(factors.canceled_offers) * w.canceled_offers
            + behavior(factors.average_reply_time) * w.average_reply_time
        )

    def apply_missing_data_noise(self, raw: float, missing: int) -> float:
        """Add an upward-only random boost scaled by the number of missing fields."""
        if missing <= 0 or not self._flags.enable_missing_data_noise:
            return raw

        noise = self._rng.random() * self._tuning.max_missing_data_noise * missing / 3
        return _clamp(raw + noise, 0.0, 1.0)

    def rescale(self, raw: float) -> float:
        t = self._tuning
        return _clamp(round(raw * 9 + 1, t.score_decimals), t.min_score, t.max_score)


_default_engine: Optional[PatientScoringEngine] = None


def get_default_engine() -> PatientScoringEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = PatientScoringEngine()
    return _default_engine


def compute_score(patient: Patient, target: Any, rng: Optional[RandomSource] = None) -> float:
    engine = PatientScoringEngine(rng) if rng is not None else get_default_engine()
    return engine.compute_score(patient, target)

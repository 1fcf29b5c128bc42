from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from waitlist_core.core.scoring_config import ScoringFeatureFlags, scoring_feature_flags, scoring_tuning
from waitlist_core.schemas.patient import Patient, RankedPatient, ScoredPatient
from waitlist_core.services.scoring_engine import PatientScoringEngine, get_default_engine, validate_target

logger = logging.getLogger(__name__)


class NoPatientData(LookupError):
    def __init__(self, message: str = "No patient data available") -> None:
        super().__init__(message)


@dataclass
class ScoreOutcome:
    """Per-patient scoring result; a failed outcome carries the error."""

    patient: Patient
    score: float
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RankingEvent:
    """Lightweight event emitted after every ranking for structured logging."""

    population: int
    failed: int
    returned: int
    duration_ms: float
    top_id: Optional[str] = None
    top_score: Optional[float] = None


class PatientRankingService:
    def __init__(
        self,
        scoring_engine: Optional[PatientScoringEngine] = None,
        *,
        flags: Optional[ScoringFeatureFlags] = None,
    ) -> None:
        self.scoring_engine = scoring_engine or get_default_engine()
        self._flags = flags or scoring_feature_flags

    def score_patient(self, patient: Patient, target: Any) -> ScoreOutcome:
        try:
            score = self.scoring_engine.compute_score(patient, target)
        except Exception as exc:
            logger.warning(
                "Failed to compute score for patient %s: %s",
                getattr(patient, "id", None) or "unknown",
                exc,
            )
            return ScoreOutcome(patient=patient, score=scoring_tuning.min_score, error=exc)
        return ScoreOutcome(patient=patient, score=score)

    def rank_top_patients(
        self,
        patients: Optional[Sequence[Patient]],
        target: Any,
        limit: Optional[int] = None,
    ) -> list[RankedPatient]:
        """Score, sort and truncate ``patients``; ranks start at 1.

        Raises ``NoPatientData`` for an empty or absent population and
        ``InvalidTargetLocation`` for a bad target.  A negative ``limit`` is a
        caller bug and raises ``ValueError``; the endpoint never passes one.
        """
        if not patients:
            raise NoPatientData()

        limit = scoring_tuning.default_limit if limit is None else limit
        if limit < 0:
            raise ValueError("limit must be non-negative")

        # A bad target fails the whole request, not each patient.
        validate_target(target)

        t0 = time.perf_counter()
        outcomes = [self.score_patient(patient, target) for patient in patients]

        scored = [ScoredPatient.from_patient(o.patient, o.score) for o in outcomes]
        # sorted() is stable: equal scores keep input order.
        ordered = sorted(scored, key=lambda p: -p.score)[:limit]
        ranked = [RankedPatient.from_scored(p, rank) for rank, p in enumerate(ordered, start=1)]

        self._emit_ranking_event(
            RankingEvent(
                population=len(outcomes),
                failed=sum(1 for o in outcomes if not o.ok),
                returned=len(ranked),
                duration_ms=(time.perf_counter() - t0) * 1000,
                top_id=ranked[0].id if ranked else None,
                top_score=ranked[0].score if ranked else None,
            )
        )
        return ranked

    def _emit_ranking_event(self, event: RankingEvent) -> None:
        if not self._flags.enable_ranking_logging:
            return

        try:
            logger.info(
                "ranking_event population=%d failed=%d returned=%d duration_ms=%.2f top_id=%s top_score=%s",
                event.population,
                event.failed,
                event.returned,
                event.duration_ms,
                event.top_id or "-",
                f"{event.top_score:.2f}" if event.top_score is not None else "-",
            )
        except Exception:  # pragma: no cover
            logger.debug("ranking_event could not be formatted")


def rank_top_patients(
    patients: Optional[Sequence[Patient]],
    target: Any,
    limit: Optional[int] = None,
) -> list[RankedPatient]:
    return PatientRankingService().rank_top_patients(patients, target, limit=limit)

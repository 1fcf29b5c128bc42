"""Patient ranking router for Waitlist Core.

Endpoints:
- GET /patients?latitude=...&longitude=...
- GET /health

The router only maps core errors onto HTTP statuses; scoring and ranking live
in :mod:`waitlist_core.services`.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from waitlist_core.core.config import settings
from waitlist_core.repositories.patient_repository import (
    PatientDataLoadError,
    PatientRepository,
    get_patient_repository,
)
from waitlist_core.schemas.patient import Location, PatientsResponse, ResponseMeta
from waitlist_core.services.dataset_state import count_loaded_patients
from waitlist_core.services.ranking_service import NoPatientData, PatientRankingService
from waitlist_core.services.scoring_engine import InvalidTargetLocation

logger = logging.getLogger(__name__)

router = APIRouter(tags=["patients"])

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def get_ranking_service() -> PatientRankingService:
    return PatientRankingService()


@router.get("/patients", response_model=PatientsResponse)
def get_top_patients(
    latitude: float = Query(..., ge=LATITUDE_RANGE[0], le=LATITUDE_RANGE[1], description="Target latitude"),
    longitude: float = Query(..., ge=LONGITUDE_RANGE[0], le=LONGITUDE_RANGE[1], description="Target longitude"),
    repository: PatientRepository = Depends(get_patient_repository),
    service: PatientRankingService = Depends(get_ranking_service),
) -> PatientsResponse:
    t0 = time.perf_counter()
    target = Location(latitude=latitude, longitude=longitude)

    try:
        patients = repository.get_patients()
        ranked = service.rank_top_patients(patients, target, limit=settings.top_patients_limit)
    except InvalidTargetLocation as exc:
        logger.warning("/patients rejected target latitude=%s longitude=%s: %s", latitude, longitude, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid coordinates provided") from exc
    except (NoPatientData, PatientDataLoadError) as exc:
        logger.warning("/patients data unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Patient data service unavailable",
        ) from exc
    except Exception as exc:
        logger.exception("/patients failed latitude=%s longitude=%s", latitude, longitude)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error") from exc

    duration_ms = (time.perf_counter() - t0) * 1000
    return PatientsResponse(
        data=ranked,
        meta=ResponseMeta(response_time=f"{round(duration_ms)}ms", count=len(ranked)),
    )


@router.get("/health")
def health(
    response: Response,
    repository: PatientRepository = Depends(get_patient_repository),
) -> dict[str, Any]:
    loaded = count_loaded_patients(repository)
    if loaded <= 0:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "patients": 0}
    return {"status": "healthy", "patients": loaded}

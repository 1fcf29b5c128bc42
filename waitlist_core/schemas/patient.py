from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Location(BaseModel):
    latitude: float
    longitude: float


class Patient(BaseModel):
    """A waitlisted patient as stored in the dataset.

    Field names are exposed in camelCase (``acceptedOffers`` …) on both input
    and output.  Unknown fields are kept so nothing from the source record is
    dropped when the patient is scored and ranked.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    id: str
    name: str
    location: Location
    age: float | None = Field(default=None, ge=0)
    accepted_offers: int | None = Field(default=None, ge=0)
    canceled_offers: int | None = Field(default=None, ge=0)
    average_reply_time: float | None = Field(default=None, ge=0)

    def missing_behavioral_fields(self) -> list[str]:
        missing: list[str] = []
        if self.accepted_offers is None:
            missing.append("acceptedOffers")
        if self.canceled_offers is None:
            missing.append("canceledOffers")
        if self.average_reply_time is None:
            missing.append("averageReplyTime")
        return missing


class ScoredPatient(Patient):
    score: float = Field(..., ge=1, le=10)

    @classmethod
    def from_patient(cls, patient: Patient, score: float) -> "ScoredPatient":
        return cls.model_validate({**patient.model_dump(by_alias=True), "score": score})


class RankedPatient(ScoredPatient):
    rank: int = Field(..., ge=1)

    @classmethod
    def from_scored(cls, scored: ScoredPatient, rank: int) -> "RankedPatient":
        return cls.model_validate({**scored.model_dump(by_alias=True), "rank": rank})


class ResponseMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    response_time: str
    count: int


class PatientsResponse(BaseModel):
    data: list[RankedPatient]
    meta: ResponseMeta


class ErrorBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    status_code: int
    details: list[Any] | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody

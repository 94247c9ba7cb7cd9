"""U-Plan: the authorization document submitted to FAS.

Only the parts the workflow relies on are modelled strictly: identifiers,
contact details, flight details, UAS characteristics and operation volumes.
Unknown keys are preserved (``extra="allow"``) so that documents produced by
the volume generator round-trip unchanged.

Wire keys are camelCase; Python attributes are snake_case.
"""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from uplanner.contracts.enums import (
    AltitudeReference,
    AltitudeUom,
    Connectivity,
    FlightCategory,
    FlightMode,
    IdTechnology,
    SpecialOperation,
    UasClass,
    UasDimension,
    UasType,
    UplanState,
)

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UplanModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def _as_list(value: object) -> object:
    """Phones and emails may be sent as a single string or a list."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


class DataIdentifier(UplanModel):
    """Data owner / data source identifier (SAC + SIC, 3 chars each)."""

    sac: str = Field(..., min_length=3, max_length=3)
    sic: str = Field(..., min_length=3, max_length=3)


class ContactDetails(UplanModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phones: list[str]
    emails: list[str]

    @field_validator("phones", "emails", mode="before")
    @classmethod
    def _wrap_single(cls, value: object) -> object:
        return _as_list(value)

    @field_validator("phones")
    @classmethod
    def _require_phone(cls, value: list[str]) -> list[str]:
        if not [p for p in value if p.strip()]:
            raise PydanticCustomError(
                "missing_value", "At least one phone number is required"
            )
        return value

    @field_validator("emails")
    @classmethod
    def _require_email(cls, value: list[str]) -> list[str]:
        if not value:
            raise PydanticCustomError("missing_value", "At least one email is required")
        for email in value:
            if not re.match(_EMAIL_PATTERN, email):
                raise PydanticCustomError(
                    "invalid_email", "Invalid email format: {email}", {"email": email}
                )
        return value


class FlightDetails(UplanModel):
    mode: FlightMode
    category: FlightCategory
    special_operation: SpecialOperation = SpecialOperation.NONE
    private_flight: bool


class FlightCharacteristics(UplanModel):
    uas_mtom: float = Field(..., gt=0, alias="uasMTOM")
    uas_max_speed: float = Field(..., gt=0)
    connectivity: Connectivity = Field(..., alias="Connectivity")
    id_technology: IdTechnology
    max_flight_time: float = Field(..., gt=0)


class GeneralCharacteristics(UplanModel):
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    type_certificate: str = Field(..., min_length=1)
    uas_type: UasType
    uas_class: UasClass
    uas_dimension: UasDimension


class Uas(UplanModel):
    registration_number: str = Field(..., min_length=1)
    serial_number: str = Field(..., min_length=1, max_length=20)
    flight_characteristics: FlightCharacteristics
    general_characteristics: GeneralCharacteristics


class GeoJsonPoint(UplanModel):
    type: Literal["Point"]
    coordinates: list[float] = Field(..., min_length=2, max_length=3)


class GeoJsonPolygon(UplanModel):
    type: Literal["Polygon"]
    coordinates: list[list[list[float]]]
    bbox: list[float] = Field(..., min_length=4, max_length=4)

    @field_validator("coordinates")
    @classmethod
    def _closed_rings(cls, value: list[list[list[float]]]) -> list[list[list[float]]]:
        for ring in value:
            if len(ring) < 4:
                raise ValueError("Polygon rings need at least 4 positions")
        return value


class Altitude(UplanModel):
    value: float
    reference: AltitudeReference
    uom: AltitudeUom


class OperationVolume(UplanModel):
    """A 4D envelope: polygon footprint, altitude band and time window."""

    geometry: GeoJsonPolygon
    time_begin: datetime
    time_end: datetime
    min_altitude: Altitude
    max_altitude: Altitude
    ordinal: int = Field(..., ge=0)


class Uplan(UplanModel):
    """Full U-Plan as required for FAS submission.

    Field declaration order is the order in which missing fields are
    reported to the operator.
    """

    idplan: int | None = None
    nameplan: str | None = None

    data_owner_identifier: DataIdentifier
    data_source_identifier: DataIdentifier
    contact_details: ContactDetails
    flight_details: FlightDetails
    uas: Uas
    operator_id: str = Field(..., min_length=1)

    takeoff_location: GeoJsonPoint | None = None
    landing_location: GeoJsonPoint | None = None
    gcs_location: GeoJsonPoint | None = None

    operation_volumes: list[OperationVolume] | None = None

    state: UplanState | None = None
    creation_time: datetime | None = None
    update_time: datetime | None = None

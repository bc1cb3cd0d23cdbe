from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_GEARBOX = "automatic"
DEFAULT_ENGINE_TYPE = "gasoline"
MIN_MODEL_YEAR = 1900


class Recommendation(str, Enum):
    """Closed set of verdicts. Values are the canonical English labels."""
    GOOD_DEAL = "Good deal"
    NOT_RECOMMENDED = "Not recommended"
    NEUTRAL = "Neutral – depends"


class VehicleAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, description="Listing title, e.g. 'Toyota Corolla 2020'")
    year: Optional[int] = Field(default=None, description="Model year")
    mileage: Optional[int] = Field(default=None, ge=0, description="Odometer reading (km)")
    price: Optional[int] = Field(default=None, ge=0, description="Asking price (ILS)")
    ownership: int = Field(default=1, ge=0, description="Number of previous owners")
    gearbox: str = Field(default=DEFAULT_GEARBOX, description="Transmission type")
    engine_type: str = Field(default=DEFAULT_ENGINE_TYPE, alias="engineType", description="Engine / fuel type")

    @field_validator("ownership", mode="before")
    @classmethod
    def _default_ownership(cls, v):
        return 1 if v is None else v

    @field_validator("gearbox", mode="before")
    @classmethod
    def _default_gearbox(cls, v):
        return v if v else DEFAULT_GEARBOX

    @field_validator("engine_type", mode="before")
    @classmethod
    def _default_engine_type(cls, v):
        return v if v else DEFAULT_ENGINE_TYPE

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class ManualVehicleInput(VehicleAttributes):
    """Attributes typed in by the user: title, year, mileage and price are mandatory."""

    title: str = Field(..., min_length=1)
    year: int = Field(...)
    mileage: int = Field(..., ge=0)
    price: int = Field(..., ge=0)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("year")
    @classmethod
    def _plausible_year(cls, v: int) -> int:
        latest = datetime.now().year
        if not MIN_MODEL_YEAR <= v <= latest:
            raise ValueError(f"year must be between {MIN_MODEL_YEAR} and {latest}")
        return v

    def to_attributes(self) -> VehicleAttributes:
        return VehicleAttributes(**self.model_dump())


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    car_data: VehicleAttributes = Field(..., alias="carData")
    evaluation: str
    recommendation: str = Field(..., description="Recommendation label in the request language")
    label: Recommendation
    score: int = Field(..., ge=0, le=100)
    score_source: Literal["model", "rules"] = Field(default="model", alias="scoreSource")

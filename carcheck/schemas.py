from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

from carcheck.domains.cars.schemas import EvaluationResult, ManualVehicleInput


class EvaluationRequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    yad2_url: Optional[str] = Field(default=None, alias="yad2Url", description="Yad2 listing URL")
    car_data: Optional[ManualVehicleInput] = Field(default=None, alias="carData", description="Manually entered car details")
    language: Literal["en", "he"] = Field(default="en", description="Language code (en/he)")


class ReportRequestBody(BaseModel):
    result: EvaluationResult
    language: Literal["en", "he"] = Field(default="en", description="Language code (en/he)")


class ErrorResponse(BaseModel):
    error: str
    kind: str
    details: Optional[str] = None

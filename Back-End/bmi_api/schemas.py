# bmi_api/schemas.py
from typing import List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .bmi import classify_bmi

UnitSystem = Literal["metric", "imperial"]
BucketName = Literal["Underweight", "Normal", "Overweight", "Obese"]
Category = Literal[
    "Underweight", "Normal weight", "Overweight",
    "Obesity Class I", "Obesity Class II", "Obesity Class III",
]

# Range checks live in bmi.convert_measurement so they surface as InvalidMeasurement.
class MeasurementIn(BaseModel):
    unit_system: UnitSystem = "metric"
    weight: Union[float, str]
    height: Optional[Union[float, str]] = None   # metres (metric)
    feet: Optional[Union[float, str]] = None     # imperial
    inches: Optional[Union[float, str]] = None   # imperial

class BmiOut(BaseModel):
    bmi: float
    category: Category

class AdviceIn(BaseModel):
    bmi: float = Field(..., gt=0, allow_inf_nan=False)
    category: Category
    unit: UnitSystem
    weight: float = Field(..., gt=0, allow_inf_nan=False)
    height: float = Field(..., gt=0, allow_inf_nan=False, description="Metres for metric, total inches for imperial.")

    @model_validator(mode="after")
    def category_matches_bmi(self):
        expected = classify_bmi(self.bmi)
        if self.category != expected:
            raise ValueError(f"category {self.category!r} does not match BMI {self.bmi:.2f} ({expected})")
        return self

class ChartEntry(BaseModel):
    name: BucketName
    bmi: Optional[float] = Field(None, allow_inf_nan=False)
    range: Optional[Tuple[float, float]] = None

class AdviceOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    personalized_advice: str = Field(..., alias="personalizedAdvice")
    chart_data: List[ChartEntry] = Field(..., alias="chartData", min_length=4, max_length=4)

class AssessmentOut(BmiOut):
    advice: AdviceOut

class CategoryInfo(BaseModel):
    category: Category
    bucket: BucketName

class CategoriesOut(BaseModel):
    categories: List[CategoryInfo]
    normal_range: Tuple[float, float]

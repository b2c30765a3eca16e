# bmi_api/service.py
from typing import Optional

from .advice import Collaborator, get_bmi_advice
from .bmi import classify_bmi, convert_measurement
from .schemas import AdviceIn, AssessmentOut, BmiOut, MeasurementIn


def calculate(measurement: MeasurementIn) -> BmiOut:
    _, _, bmi = convert_measurement(
        measurement.unit_system,
        measurement.weight,
        height=measurement.height,
        feet=measurement.feet,
        inches=measurement.inches,
    )
    return BmiOut(bmi=bmi, category=classify_bmi(bmi))


def run_assessment(measurement: MeasurementIn, collaborator: Optional[Collaborator] = None) -> AssessmentOut:
    """convert -> classify -> request advice -> normalize.

    InvalidMeasurement is raised before any advice request is made;
    AdviceUnavailable propagates from the advice call.
    """
    weight, height, bmi = convert_measurement(
        measurement.unit_system,
        measurement.weight,
        height=measurement.height,
        feet=measurement.feet,
        inches=measurement.inches,
    )
    category = classify_bmi(bmi)
    request = AdviceIn(
        bmi=bmi,
        category=category,
        unit=measurement.unit_system,
        weight=weight,
        height=height,
    )
    advice = get_bmi_advice(request, collaborator=collaborator)
    return AssessmentOut(bmi=bmi, category=category, advice=advice)

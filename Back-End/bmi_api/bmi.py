# bmi_api/bmi.py
import math
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidMeasurement

IMPERIAL_FACTOR = 703.0
INCHES_PER_FOOT = 12

UNDERWEIGHT = "Underweight"
NORMAL = "Normal weight"
OVERWEIGHT = "Overweight"
OBESITY_I = "Obesity Class I"
OBESITY_II = "Obesity Class II"
OBESITY_III = "Obesity Class III"

CATEGORIES = [UNDERWEIGHT, NORMAL, OVERWEIGHT, OBESITY_I, OBESITY_II, OBESITY_III]

# Lower bound of each category above Underweight, ascending.
_THRESHOLDS = [
    (40.0, OBESITY_III),
    (35.0, OBESITY_II),
    (30.0, OBESITY_I),
    (25.0, OVERWEIGHT),
    (18.5, NORMAL),
]

# BMI each category is "reached" at, used for weight-change estimates.
TARGET_BMI = {
    UNDERWEIGHT: 18.5,
    NORMAL: 24.9,
    OVERWEIGHT: 25.0,
    OBESITY_I: 30.0,
    OBESITY_II: 35.0,
    OBESITY_III: 40.0,
}

NORMAL_RANGE = (18.5, 24.9)


def _number(name: str, value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidMeasurement(f"{name} is required and must be a number")
    try:
        num = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise InvalidMeasurement(f"{name} must be a number")
    if not math.isfinite(num):
        raise InvalidMeasurement(f"{name} must be a finite number")
    return num


def _integer(name: str, value: Any) -> int:
    num = _number(name, value)
    if not num.is_integer():
        raise InvalidMeasurement(f"{name} must be a whole number")
    return int(num)


def _positive(name: str, value: Any) -> float:
    num = _number(name, value)
    if num <= 0:
        raise InvalidMeasurement(f"{name} must be positive")
    return num


def convert_measurement(
    unit_system: str,
    weight: Any,
    height: Any = None,
    feet: Any = None,
    inches: Any = None,
) -> Tuple[float, float, float]:
    """Validate raw form fields and return ``(weight, height, bmi)``.

    Metric: weight in kg, height in metres.
    Imperial: weight in lb, height given as feet + inches and returned as total inches.
    """
    w = _positive("Weight", weight)

    if unit_system == "metric":
        h = _positive("Height", height)
        bmi = w / h / h
    elif unit_system == "imperial":
        ft = _integer("Feet", feet)
        if ft < 0:
            raise InvalidMeasurement("Feet must be non-negative")
        inch = _integer("Inches", inches)
        if inch < 0:
            raise InvalidMeasurement("Inches must be non-negative")
        if inch >= INCHES_PER_FOOT:
            raise InvalidMeasurement("Inches must be < 12")
        h = float(ft) * INCHES_PER_FOOT + inch
        if h <= 0:
            raise InvalidMeasurement("Total height must be positive")
        bmi = IMPERIAL_FACTOR * w / (h * h)
    else:
        raise InvalidMeasurement(f"Unknown unit system: {unit_system!r}")

    if not math.isfinite(bmi) or bmi <= 0:
        raise InvalidMeasurement("Please check your inputs. The calculated BMI is invalid.")
    return w, h, bmi


def classify_bmi(bmi: float) -> str:
    for lower, category in _THRESHOLDS:
        if bmi >= lower:
            return category
    return UNDERWEIGHT


def weight_change_for_target(weight: float, height: float, unit: str, target_category: str) -> float:
    """Weight to gain (+) or lose (-) to reach the BMI that marks ``target_category``.

    Returned in the same unit as ``weight`` (kg for metric, lb for imperial).
    """
    if target_category not in TARGET_BMI:
        raise ValueError(f"Unknown category {target_category}")
    target_bmi = TARGET_BMI[target_category]
    if unit == "imperial":
        target_weight = target_bmi * height * height / IMPERIAL_FACTOR
    else:
        target_weight = target_bmi * height * height
    return target_weight - weight


def healthy_weight_change(weight: float, height: float, unit: str, category: str) -> Optional[Dict[str, float]]:
    if category == NORMAL:
        return None
    # Underweight's target BMI is the bottom of the normal range.
    return {
        "to_lower_normal": weight_change_for_target(weight, height, unit, UNDERWEIGHT),
        "to_upper_normal": weight_change_for_target(weight, height, unit, NORMAL),
    }

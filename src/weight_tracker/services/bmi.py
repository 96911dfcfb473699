"""BMI calculation and classification."""

import math

from weight_tracker.domain.weights import BMIResult
from weight_tracker.services.weight_stats import round_weight

UNDERWEIGHT_LIMIT = 18.5
NORMAL_LIMIT = 25.0
OVERWEIGHT_LIMIT = 30.0


def calculate_bmi(height_cm: float | None, weight_kg: float | None) -> float:
    """Return BMI rounded to one decimal, or 0 when it cannot be computed."""
    if not height_cm or not weight_kg:
        return 0
    if not (math.isfinite(height_cm) and math.isfinite(weight_kg)):
        return 0
    if height_cm <= 0 or weight_kg <= 0:
        return 0
    height_m = height_cm / 100
    return round_weight(weight_kg / (height_m * height_m))


def get_bmi_category(bmi: float) -> BMIResult:
    """Classify a BMI value.

    A BMI of 0 means "no data" and is reported as Normal with a neutral color.
    """
    if bmi == 0:
        return BMIResult(bmi=0, category="Normal", color="gray")
    if bmi < UNDERWEIGHT_LIMIT:
        return BMIResult(bmi=bmi, category="Underweight", color="blue")
    if bmi < NORMAL_LIMIT:
        return BMIResult(bmi=bmi, category="Normal", color="green")
    if bmi < OVERWEIGHT_LIMIT:
        return BMIResult(bmi=bmi, category="Overweight", color="orange")
    return BMIResult(bmi=bmi, category="Obese", color="red")

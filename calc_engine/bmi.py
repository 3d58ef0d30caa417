"""
Body Mass Index calculator.

Height and weight are normalized to meters and kilograms, BMI is classified
against the fixed WHO cut points, and the healthy weight range is reported
back in the caller's own weight unit.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from .exceptions import BMIInputError
from .models import BMICalculatorOptions, BMICalculatorResult, BMIStatus, WeightUnit

# ─── Constants ───────────────────────────────────────────────────────

METERS_PER_INCH = 0.0254
METERS_PER_FOOT = 0.3048

KG_PER_UNIT: dict[str, float] = {
    "kg": 1.0,
    "lb": 0.45359237,
    "st": 6.35029318,
}

HEALTHY_BMI_MIN = 18.5
HEALTHY_BMI_MAX = 25.0

MIN_AGE = 2
MAX_AGE = 120


# ─── Public API ──────────────────────────────────────────────────────


def bmi_calculator(options: BMICalculatorOptions | Mapping[str, Any]) -> BMICalculatorResult:
    """Compute BMI and derived health metrics.

    Args:
        options: BMICalculatorOptions, or a mapping validated into one.

    Raises:
        BMIInputError: Age outside [2, 120], height or weight that is not a
            finite positive number, or missing height fields for the chosen unit.
        pydantic.ValidationError: Unknown unit or non-numeric value.
    """
    if not isinstance(options, BMICalculatorOptions):
        options = BMICalculatorOptions.model_validate(dict(options))

    # NaN fails this comparison
    if not MIN_AGE <= options.age <= MAX_AGE:
        raise BMIInputError(
            f"Age must be between {MIN_AGE} and {MAX_AGE}",
            details={"age": options.age},
        )

    height_m = normalize_height(options)
    weight_kg = options.weight_value * KG_PER_UNIT[options.weight_unit]

    if not (0 < height_m < math.inf and 0 < weight_kg < math.inf):
        raise BMIInputError(
            "Height and weight must be finite positive numbers",
            details={"height_m": height_m, "weight_kg": weight_kg},
        )

    bmi = weight_kg / height_m**2
    status = bmi_status(bmi)

    healthy_min = _from_kg(HEALTHY_BMI_MIN * height_m**2, options.weight_unit)
    healthy_max = _from_kg(HEALTHY_BMI_MAX * height_m**2, options.weight_unit)

    weight_to_target = 0.0
    if status == "underweight":
        weight_to_target = healthy_min - options.weight_value
    elif status in ("overweight", "obesity"):
        weight_to_target = options.weight_value - healthy_max

    return BMICalculatorResult(
        bmi=round_half_up(bmi, 1),
        bmi_status=status,
        healthy_bmi_min=HEALTHY_BMI_MIN,
        healthy_bmi_max=HEALTHY_BMI_MAX,
        healthy_weight_min=round_half_up(healthy_min, 1),
        healthy_weight_max=round_half_up(healthy_max, 1),
        weight_to_target=round_half_up(weight_to_target, 1),
        bmi_prime=round_half_up(bmi / HEALTHY_BMI_MAX, 2),
        ponderal_index=round_half_up(weight_kg / height_m**3, 1),
        height_meters=round_half_up(height_m, 3),
        weight_kg=round_half_up(weight_kg, 2),
    )


def bmi_status(bmi: float) -> BMIStatus:
    """Classify a BMI value against the WHO adult cut points."""
    if bmi < 18.5:
        return "underweight"
    if bmi < 25:
        return "normal"
    if bmi < 30:
        return "overweight"
    return "obesity"


def normalize_height(options: BMICalculatorOptions) -> float:
    """Convert the height fields for `options.height_unit` to meters."""
    unit = options.height_unit

    if unit in ("cm", "m", "in", "ft"):
        if options.height_value is None:
            raise BMIInputError(
                f"height_value is required for {unit}", details={"height_unit": unit}
            )
        factor = {"cm": 0.01, "m": 1.0, "in": METERS_PER_INCH, "ft": METERS_PER_FOOT}[unit]
        return options.height_value * factor

    if unit == "ft_in":
        if options.height_ft is None or options.height_in is None:
            raise BMIInputError(
                "height_ft and height_in are required for ft_in",
                details={"height_unit": unit},
            )
        return (options.height_ft * 12 + options.height_in) * METERS_PER_INCH

    # m_cm
    if options.height_m is None or options.height_cm is None:
        raise BMIInputError(
            "height_m and height_cm are required for m_cm",
            details={"height_unit": unit},
        )
    return options.height_m + options.height_cm / 100


def round_half_up(value: float, digits: int) -> float:
    """Round like JavaScript `Math.round(x * 10**d) / 10**d`."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


# ─── Internal Helpers ────────────────────────────────────────────────


def _from_kg(kg: float, unit: WeightUnit) -> float:
    return kg / KG_PER_UNIT[unit]

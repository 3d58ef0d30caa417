"""
Pydantic models for tool configurations, function options and results.

Configurations arrive as camelCase JSON from the content store, so fields
that are camelCase on the wire carry an alias and are populated by either
name. Each registered function declares its output as one of the result
models below; the engine flattens them by alias into the result map.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ─── Shared Types ────────────────────────────────────────────────────

InputValue = Union[int, float, str]
ResultValue = Union[int, float, str]

ConversionMode = Literal["words", "check_writing", "currency", "currency_vat"]
Currency = Literal["USD", "GBP", "EUR", "PLN", "RUB"]
TextCase = Literal["lowercase", "UPPERCASE", "Title Case", "Sentence case"]
HeightUnit = Literal["cm", "m", "in", "ft", "ft_in", "m_cm"]
WeightUnit = Literal["kg", "lb", "st"]
BMIStatus = Literal["underweight", "normal", "overweight", "obesity"]


# ─── Engine Configuration ───────────────────────────────────────────


class InputSpec(BaseModel):
    """A named input of a tool, with an optional default."""

    key: str
    default: Optional[InputValue] = None


class OutputSpec(BaseModel):
    """A named output. Advisory: the engine never filters by it."""

    key: str
    precision: Optional[int] = None


class FunctionCall(BaseModel):
    """Reference to a registered function plus its parameter mapping."""

    model_config = ConfigDict(populate_by_name=True)

    function_name: str = Field(alias="functionName")
    params: dict[str, str] = Field(default_factory=dict)  # paramName -> inputKey


class EngineConfig(BaseModel):
    """Declarative description of one calculator tool."""

    inputs: list[InputSpec] = Field(default_factory=list)
    formulas: dict[str, str] = Field(default_factory=dict)
    functions: dict[str, FunctionCall] = Field(default_factory=dict)
    outputs: list[OutputSpec] = Field(default_factory=list)
    language: Optional[str] = None

    @field_validator("formulas", "functions", mode="before")
    @classmethod
    def _null_mapping_as_empty(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("inputs", "outputs", mode="before")
    @classmethod
    def _null_list_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("inputs")
    @classmethod
    def _unique_keys(cls, inputs: list[InputSpec]) -> list[InputSpec]:
        seen: set[str] = set()
        duplicates: set[str] = set()
        for spec in inputs:
            if spec.key in seen:
                duplicates.add(spec.key)
            seen.add(spec.key)
        if duplicates:
            raise ValueError(f"Duplicate input keys: {', '.join(sorted(duplicates))}")
        return inputs


# ─── Validation Result ──────────────────────────────────────────────


class ValidationFinding(BaseModel):
    """One problem found by the pre-flight input check."""

    code: str  # MISSING_REQUIRED_INPUT or INVALID_NUMBER
    field: str  # The input key
    message: str


class ValidationResult(BaseModel):
    """Outcome of `validate()`: a verdict plus one error per bad input."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    findings: list[ValidationFinding] = Field(default_factory=list)


# ─── Function Options ───────────────────────────────────────────────


class NumberToWordsOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: ConversionMode = "words"
    currency: Currency = "USD"
    vat_rate: float = Field(0.0, alias="vatRate")
    text_case: TextCase = Field("Sentence case", alias="textCase")
    language: str = "en"


class BMICalculatorOptions(BaseModel):
    """BMI inputs. Numeric strings are accepted and coerced."""

    age: float
    gender: Optional[Literal["male", "female"]] = None
    height_unit: HeightUnit
    height_value: Optional[float] = None
    height_ft: Optional[float] = None
    height_in: Optional[float] = None
    height_m: Optional[float] = None
    height_cm: Optional[float] = None
    weight_unit: WeightUnit
    weight_value: float


# ─── Function Results ───────────────────────────────────────────────


class NumberToWordsResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text_result: str = Field(alias="textResult")
    calculated_total: Optional[float] = Field(None, alias="calculatedTotal")
    vat_amount: Optional[float] = Field(None, alias="vatAmount")
    principal_amount: Optional[float] = Field(None, alias="principalAmount")


class TextCaseResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text_result: str = Field(alias="textResult")


class BMICalculatorResult(BaseModel):
    bmi: float
    bmi_status: BMIStatus
    healthy_bmi_min: float
    healthy_bmi_max: float
    healthy_weight_min: float
    healthy_weight_max: float
    weight_to_target: float
    bmi_prime: float
    ponderal_index: float
    height_meters: float
    weight_kg: float

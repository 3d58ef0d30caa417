"""
Static registry of the pure functions a tool configuration can call.

Each entry pairs an adapter (engine parameter dict -> result) with the
declared output: a pydantic result model whose fields are flattened into the
engine's result map, or ``None`` for a scalar stored under the configured
output key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel

from .bmi import bmi_calculator
from .models import (
    BMICalculatorResult,
    NumberToWordsOptions,
    NumberToWordsResult,
    ResultValue,
    TextCaseResult,
)
from .number_to_words import number_to_words
from .text_case import text_case_converter
from .words_to_number import words_to_number

Params = Mapping[str, Any]
FunctionOutput = Union[BaseModel, ResultValue]


class FunctionName(str, Enum):
    NUMBER_TO_WORDS = "numberToWords"
    TEXT_CASE_CONVERTER = "textCaseConverter"
    BMI_CALCULATOR = "bmiCalculator"
    WORDS_TO_NUMBER = "wordsToNumber"


@dataclass(frozen=True)
class RegisteredFunction:
    name: FunctionName
    handler: Callable[[Params], FunctionOutput]
    output_model: Optional[type[BaseModel]]  # None → scalar result

    def __call__(self, params: Params) -> FunctionOutput:
        return self.handler(params)


# ─── Adapters ────────────────────────────────────────────────────────


def _number_to_words(params: Params) -> NumberToWordsResult:
    value = params.get("value", params.get("number"))
    options = NumberToWordsOptions.model_validate(
        {k: v for k, v in params.items() if k not in ("value", "number")}
    )
    return number_to_words(value, options)


def _text_case_converter(params: Params) -> TextCaseResult:
    return text_case_converter(params.get("text"), params.get("mode", "Sentence case"))


def _bmi_calculator(params: Params) -> BMICalculatorResult:
    return bmi_calculator(params)


def _words_to_number(params: Params) -> float:
    return float(words_to_number(str(params.get("text", ""))))


# ─── Registry ────────────────────────────────────────────────────────

REGISTRY: dict[FunctionName, RegisteredFunction] = {
    entry.name: entry
    for entry in (
        RegisteredFunction(FunctionName.NUMBER_TO_WORDS, _number_to_words, NumberToWordsResult),
        RegisteredFunction(FunctionName.TEXT_CASE_CONVERTER, _text_case_converter, TextCaseResult),
        RegisteredFunction(FunctionName.BMI_CALCULATOR, _bmi_calculator, BMICalculatorResult),
        RegisteredFunction(FunctionName.WORDS_TO_NUMBER, _words_to_number, None),
    )
}


def lookup(name: str) -> Optional[RegisteredFunction]:
    """Return the registered function called `name`, or None."""
    try:
        return REGISTRY[FunctionName(name)]
    except ValueError:
        return None


def registered_names() -> list[str]:
    return [name.value for name in REGISTRY]

"""
Custom exception hierarchy for the calculation engine.

Each exception type carries a machine-readable code so callers (the HTTP
layer, the CLI, log processors) can classify failures without parsing
messages.
"""

from __future__ import annotations


class CalcEngineError(Exception):
    """Base exception for all calculation engine failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class InvalidConfigError(CalcEngineError):
    """The tool configuration is structurally invalid."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_CONFIG", message, details)


class UnknownFunctionError(CalcEngineError):
    """A configuration references a function that is not registered."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UNKNOWN_FUNCTION", message, details)


class FormulaEvaluationError(CalcEngineError):
    """A formula failed to parse or did not produce a finite real number."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("FORMULA_EVALUATION_FAILED", message, details)


class InvalidNumberError(CalcEngineError, ValueError):
    """A value could not be read as a decimal number."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_NUMBER", message, details)


class BMIInputError(CalcEngineError, ValueError):
    """BMI inputs are out of range or incomplete for the chosen units."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("BMI_INPUT_INVALID", message, details)

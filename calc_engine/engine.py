"""
Calculation engine: turns a declarative tool configuration plus user inputs
into a flat map of named results.

Flow:
  ┌──────────────┐
  │ input values │
  └──────┬───────┘
         │
  ┌──────▼──────┐
  │    Scope    │   ← Declared inputs only; caller value, else default
  └──────┬──────┘
         │
         ├──────────────────────┐
         │                      │
  ┌──────▼──────┐        ┌──────▼──────┐
  │  Formulas   │        │  Functions  │   ← Registry lookup + param glue
  │   (sympy)   │        │             │
  └──────┬──────┘        └──────┬──────┘
         │                      │
         └──────────┬───────────┘
                    │
             ┌──────▼──────┐
             │ Result map  │   ← Later keys overwrite earlier ones
             └─────────────┘

Per-entry failures never escape `calculate`: a broken formula yields 0, a
failing function contributes nothing, and both are logged.
"""

from __future__ import annotations

import ast
import logging
import math
from functools import lru_cache
from typing import Any, Callable, Mapping, Optional, Union

import sympy
from pydantic import BaseModel, ValidationError

from .exceptions import FormulaEvaluationError, InvalidConfigError, UnknownFunctionError
from .models import EngineConfig, ResultValue, ValidationFinding, ValidationResult
from .number_parsing import parse_float
from .registry import lookup

logger = logging.getLogger(__name__)

ConfigLike = Union[EngineConfig, Mapping[str, Any]]
Scope = dict[str, Any]

# ─── Formula Evaluation ──────────────────────────────────────────────
#
# Formulas are read with `ast` against a fixed grammar (numbers, variables,
# + - * / % ** ^, the functions below) and rebuilt as an unevaluated sympy
# tree. Every literal becomes a Float, so the compiled expression runs in
# machine floats: overflow raises instead of growing an exact integer.

MAX_FORMULA_LENGTH = 1000


def _negate(x: sympy.Expr) -> sympy.Expr:
    return sympy.Mul(sympy.S.NegativeOne, x, evaluate=False)


def _divide(a: sympy.Expr, b: sympy.Expr) -> sympy.Expr:
    return sympy.Mul(a, sympy.Pow(b, sympy.S.NegativeOne, evaluate=False), evaluate=False)


def _ln(x: sympy.Expr) -> sympy.Expr:
    return sympy.log(x, evaluate=False)


def _log(x: sympy.Expr, base: sympy.Expr | None = None) -> sympy.Expr:
    return _ln(x) if base is None else _divide(_ln(x), _ln(base))


def _round_half_up(x: sympy.Expr) -> sympy.Expr:
    return sympy.floor(sympy.Add(x, sympy.Float(0.5), evaluate=False), evaluate=False)


def _lattice(op: Any) -> Callable[..., sympy.Expr]:
    def build(*args: sympy.Expr) -> sympy.Expr:
        return args[0] if len(args) == 1 else op(*args, evaluate=False)
    return build


_BINARY_OPS: dict[type, Callable[[sympy.Expr, sympy.Expr], sympy.Expr]] = {
    ast.Add: lambda a, b: sympy.Add(a, b, evaluate=False),
    ast.Sub: lambda a, b: sympy.Add(a, _negate(b), evaluate=False),
    ast.Mult: lambda a, b: sympy.Mul(a, b, evaluate=False),
    ast.Div: _divide,
    ast.Mod: lambda a, b: sympy.Mod(a, b, evaluate=False),
    ast.Pow: lambda a, b: sympy.Pow(a, b, evaluate=False),
}

# name -> (min args, max args, builder)
_FUNCTIONS: dict[str, tuple[int, int, Callable[..., sympy.Expr]]] = {
    "sqrt": (1, 1, lambda x: sympy.sqrt(x, evaluate=False)),
    "abs": (1, 1, lambda x: sympy.Abs(x, evaluate=False)),
    "exp": (1, 1, lambda x: sympy.exp(x, evaluate=False)),
    "log": (1, 2, _log),
    "log10": (1, 1, lambda x: _log(x, sympy.Float(10))),
    "log2": (1, 1, lambda x: _log(x, sympy.Float(2))),
    "sin": (1, 1, lambda x: sympy.sin(x, evaluate=False)),
    "cos": (1, 1, lambda x: sympy.cos(x, evaluate=False)),
    "tan": (1, 1, lambda x: sympy.tan(x, evaluate=False)),
    "asin": (1, 1, lambda x: sympy.asin(x, evaluate=False)),
    "acos": (1, 1, lambda x: sympy.acos(x, evaluate=False)),
    "atan": (1, 1, lambda x: sympy.atan(x, evaluate=False)),
    "floor": (1, 1, lambda x: sympy.floor(x, evaluate=False)),
    "ceil": (1, 1, lambda x: sympy.ceiling(x, evaluate=False)),
    "round": (1, 1, _round_half_up),
    "min": (1, 64, _lattice(sympy.Min)),
    "max": (1, 64, _lattice(sympy.Max)),
    "pow": (2, 2, lambda a, b: sympy.Pow(a, b, evaluate=False)),
}

_CONSTANTS: dict[str, sympy.Expr] = {
    "pi": sympy.pi,
    "e": sympy.E,
}


def _unsupported(formula: str, what: str) -> FormulaEvaluationError:
    return FormulaEvaluationError(
        f"Unsupported {what} in formula {formula!r}",
        details={"formula": formula},
    )


def _build(node: ast.AST, formula: str) -> sympy.Expr:
    if isinstance(node, ast.Constant):
        if type(node.value) not in (int, float):
            raise _unsupported(formula, "literal")
        value = float(node.value)
        if not math.isfinite(value):
            raise _unsupported(formula, "literal")
        return sympy.Float(value, 17)

    if isinstance(node, ast.Name):
        if node.id in _CONSTANTS:
            return _CONSTANTS[node.id]
        if node.id in _FUNCTIONS or node.id.startswith("__"):
            raise _unsupported(formula, f"name {node.id!r}")
        return sympy.Symbol(node.id)

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_build(node.left, formula), _build(node.right, formula))

    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.UAdd, ast.USub)):
        operand = _build(node.operand, formula)
        return _negate(operand) if isinstance(node.op, ast.USub) else operand

    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        min_args, max_args, build = _FUNCTIONS[node.func.id]
        if not min_args <= len(node.args) <= max_args:
            raise _unsupported(formula, f"argument count for {node.func.id}()")
        return build(*(_build(arg, formula) for arg in node.args))

    raise _unsupported(formula, f"syntax ({type(node).__name__})")


def parse_formula(formula: str) -> sympy.Expr:
    """Parse a formula into an unevaluated sympy expression.

    Only numbers, variables, arithmetic operators and the functions in
    `_FUNCTIONS` are accepted. ``^`` is a power. Every identifier that is
    not a known function or constant becomes a plain Symbol, so names like
    ``E``, ``S`` or ``beta`` stay variables.

    Raises:
        FormulaEvaluationError: Anything outside that grammar, including
            attribute access, subscripts, strings and comparisons.
        SyntaxError: The text is not an expression at all.
    """
    if len(formula) > MAX_FORMULA_LENGTH:
        raise _unsupported(formula[:40] + "...", "length")
    tree = ast.parse(formula.replace("^", "**"), mode="eval")
    return _build(tree.body, formula)


@lru_cache(maxsize=512)
def compile_formula(formula: str) -> tuple[tuple[str, ...], Callable[..., Any]]:
    """Parse and compile `formula` to a float function, cached by formula text.

    Returns the variable names in argument order plus the compiled function.
    """
    expr = parse_formula(formula)
    names = tuple(sorted(symbol.name for symbol in expr.free_symbols))
    func = sympy.lambdify([sympy.Symbol(name) for name in names], expr, modules="math")
    return names, func


def evaluate_formula(formula: str, numeric_scope: Mapping[str, float]) -> float:
    """Evaluate `formula` against numeric variable values.

    Variables missing from `numeric_scope` evaluate as 0.

    Raises:
        FormulaEvaluationError: Parse failure, unsupported syntax, or a
            result that is not a finite real number.
    """
    try:
        names, func = compile_formula(formula)
        value = float(func(*(numeric_scope.get(name, 0.0) for name in names)))
    except Exception as exc:
        raise FormulaEvaluationError(
            f"Could not evaluate formula {formula!r}: {exc}",
            details={"formula": formula},
        ) from exc

    if not math.isfinite(value):
        raise FormulaEvaluationError(
            f"Formula {formula!r} produced a non-finite result",
            details={"formula": formula, "value": str(value)},
        )
    return value


# ─── Engine ──────────────────────────────────────────────────────────


class CalculationEngine:
    """Evaluates tool configurations.

    Usage:
        engine = CalculationEngine()
        result = engine.calculate(config, {"amount": "1250.50"})

    Args:
        strict: Reject configurations naming unregistered functions with
            `UnknownFunctionError` instead of skipping those entries.
        default_language: Language passed to functions when the
            configuration does not set one.
    """

    def __init__(self, strict: bool = False, default_language: str | None = None):
        self.strict = strict
        self.default_language = default_language

    def calculate(
        self, config: ConfigLike, input_values: Optional[Mapping[str, Any]] = None
    ) -> dict[str, ResultValue]:
        """Compute every formula and function output of `config`.

        Raises:
            InvalidConfigError: The configuration is structurally invalid.
            UnknownFunctionError: Strict mode only.
        """
        config = load_config(config)
        if self.strict:
            self._check_functions(config)

        scope = build_scope(config, input_values)
        results: dict[str, ResultValue] = {}

        # ── Formulas ────────────────────────────────────────────────
        numeric_scope = {key: _numeric(value) for key, value in scope.items()}
        for output_key, formula in config.formulas.items():
            try:
                results[output_key] = evaluate_formula(formula, numeric_scope)
            except FormulaEvaluationError as exc:
                logger.error("Formula for %s failed: %s", output_key, exc)
                results[output_key] = 0

        # ── Functions ───────────────────────────────────────────────
        language = config.language or self.default_language
        for output_key, call in config.functions.items():
            entry = lookup(call.function_name)
            if entry is None:
                logger.debug("Skipping unregistered function %r", call.function_name)
                continue

            params: dict[str, Any] = {}
            if language:
                params["language"] = language
            for param_name, input_key in call.params.items():
                if input_key not in scope:
                    continue
                value = scope[input_key]
                params[param_name] = parse_float(value) if param_name == "vatRate" else value

            try:
                output = entry(params)
            except Exception as exc:
                logger.error(
                    "Function %s for %s failed: %s", call.function_name, output_key, exc
                )
                continue

            if isinstance(output, BaseModel):
                results.update(output.model_dump(by_alias=True, exclude_none=True))
            else:
                results[output_key] = output

        return results

    def validate(
        self, config: ConfigLike, input_values: Optional[Mapping[str, Any]] = None
    ) -> ValidationResult:
        """Check that every declared input has a usable numeric value.

        Never raises for input problems; each bad input yields one error.
        """
        config = load_config(config)
        input_values = input_values or {}
        findings: list[ValidationFinding] = []

        for spec in config.inputs:
            value = input_values.get(spec.key)
            if _is_empty(value):
                value = spec.default

            if _is_empty(value):
                findings.append(
                    ValidationFinding(
                        code="MISSING_REQUIRED_INPUT",
                        field=spec.key,
                        message=f"Missing required input: {spec.key}",
                    )
                )
            elif not math.isfinite(parse_float(value)):
                findings.append(
                    ValidationFinding(
                        code="INVALID_NUMBER",
                        field=spec.key,
                        message=f"Invalid number for input: {spec.key}",
                    )
                )

        return ValidationResult(
            valid=not findings,
            errors=[f.message for f in findings],
            findings=findings,
        )

    # ─── Strict Mode ────────────────────────────────────────────────

    def _check_functions(self, config: EngineConfig) -> None:
        unknown = sorted(
            {call.function_name for call in config.functions.values()
             if lookup(call.function_name) is None}
        )
        if unknown:
            raise UnknownFunctionError(
                f"Unregistered function(s): {', '.join(unknown)}",
                details={"functions": unknown},
            )


# ─── Helpers ─────────────────────────────────────────────────────────


def load_config(config: ConfigLike) -> EngineConfig:
    """Return `config` as an EngineConfig, validating mappings.

    Raises:
        InvalidConfigError: The mapping does not describe a valid config.
    """
    if isinstance(config, EngineConfig):
        return config
    try:
        return EngineConfig.model_validate(config)
    except ValidationError as exc:
        raise InvalidConfigError(
            f"Invalid tool configuration: {exc.error_count()} error(s)",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def build_scope(config: EngineConfig, input_values: Optional[Mapping[str, Any]]) -> Scope:
    """Map each declared input to the caller's value, else its default.

    ``None`` and ``""`` count as not supplied. Inputs with neither a value
    nor a default are absent from the scope.
    """
    input_values = input_values or {}
    scope: Scope = {}
    for spec in config.inputs:
        value = input_values.get(spec.key)
        if not _is_empty(value):
            scope[spec.key] = value
        elif spec.default is not None:
            scope[spec.key] = spec.default
    return scope


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _numeric(value: Any) -> float:
    number = parse_float(value)
    return 0.0 if math.isnan(number) else number


_default_engine = CalculationEngine()


def calculate(
    config: ConfigLike, input_values: Optional[Mapping[str, Any]] = None
) -> dict[str, ResultValue]:
    """Module-level `CalculationEngine().calculate` with default settings."""
    return _default_engine.calculate(config, input_values)


def validate(
    config: ConfigLike, input_values: Optional[Mapping[str, Any]] = None
) -> ValidationResult:
    """Module-level `CalculationEngine().validate` with default settings."""
    return _default_engine.validate(config, input_values)

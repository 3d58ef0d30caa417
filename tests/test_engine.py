"""
Tests for the calculation engine: scope building, formula evaluation,
function invocation and the validate pre-flight check.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import pytest

from calc_engine.engine import (
    CalculationEngine,
    build_scope,
    calculate,
    evaluate_formula,
    load_config,
    validate,
)
from calc_engine.exceptions import FormulaEvaluationError, InvalidConfigError, UnknownFunctionError
from calc_engine.registry import FunctionName, lookup, registered_names


def _formula_config(formula: str, *keys: str) -> dict[str, Any]:
    return {"inputs": [{"key": k} for k in keys], "formulas": {"result": formula}}


def _words_config(**extra: Any) -> dict[str, Any]:
    config: dict[str, Any] = {
        "inputs": [{"key": "number"}, {"key": "mode"}, {"key": "vatRate"}, {"key": "textCase"}],
        "functions": {
            "textResult": {
                "functionName": "numberToWords",
                "params": {"value": "number", "mode": "mode", "vatRate": "vatRate",
                           "textCase": "textCase"},
            }
        },
    }
    config.update(extra)
    return config


# ═══════════════════════════════════════════════════════════════════════
# SCOPE
# ═══════════════════════════════════════════════════════════════════════


class TestScope:
    CONFIG = load_config({"inputs": [{"key": "a", "default": 5}, {"key": "b"}]})

    def test_caller_value_wins(self):
        assert build_scope(self.CONFIG, {"a": 1, "b": 2}) == {"a": 1, "b": 2}

    @pytest.mark.parametrize("empty", [None, ""])
    def test_empty_values_use_default(self, empty):
        assert build_scope(self.CONFIG, {"a": empty}) == {"a": 5}

    def test_undeclared_inputs_ignored(self):
        assert build_scope(self.CONFIG, {"z": 9}) == {"a": 5}

    def test_zero_is_a_value(self):
        assert build_scope(self.CONFIG, {"a": 0}) == {"a": 0}


# ═══════════════════════════════════════════════════════════════════════
# FORMULAS
# ═══════════════════════════════════════════════════════════════════════


class TestFormulas:
    def test_arithmetic_with_string_inputs(self):
        assert calculate(_formula_config("a + b", "a", "b"), {"a": "2", "b": 3}) == {"result": 5.0}

    @pytest.mark.parametrize(
        "formula, expected",
        [
            ("2^3", 8.0),
            ("2**3", 8.0),
            ("10 % 3", 1.0),
            ("(1 + 2) * 3", 9.0),
            ("sqrt(16)", 4.0),
            ("abs(-3)", 3.0),
            ("max(1, 5, 3)", 5.0),
            ("min(4, 2)", 2.0),
            ("pow(2, 10)", 1024.0),
            ("round(2.5)", 3.0),
            ("ceil(1.2)", 2.0),
            ("floor(1.8)", 1.0),
        ],
    )
    def test_operators_and_functions(self, formula, expected):
        assert evaluate_formula(formula, {}) == expected

    @pytest.mark.parametrize(
        "formula, expected",
        [("log(e)", 1.0), ("log10(1000)", 3.0), ("log2(8)", 3.0), ("log(8, 2)", 3.0),
         ("exp(0)", 1.0), ("sin(pi / 2)", 1.0), ("cos(0)", 1.0), ("atan(1) * 4", 3.14159265)],
    )
    def test_transcendental(self, formula, expected):
        assert evaluate_formula(formula, {}) == pytest.approx(expected)

    def test_sympy_builtin_names_are_variables(self):
        config = _formula_config("E * 3 + S + N", "E", "S", "N")
        assert calculate(config, {"E": 2, "S": 1, "N": 1}) == {"result": 8.0}

    def test_parse_float_coercion(self):
        assert calculate(_formula_config("a * 2", "a"), {"a": "12px"}) == {"result": 24.0}

    def test_unreadable_value_is_zero(self):
        assert calculate(_formula_config("a + 1", "a"), {"a": "abc"}) == {"result": 1.0}

    def test_missing_variable_is_zero(self):
        assert calculate(_formula_config("a + missing", "a"), {"a": 4}) == {"result": 4.0}

    def test_undeclared_input_not_visible(self):
        assert calculate(_formula_config("z", "a"), {"a": 1, "z": 5}) == {"result": 0.0}

    def test_defaults_feed_formulas(self):
        config = {"inputs": [{"key": "c", "default": 100}], "formulas": {"f": "c * 9 / 5 + 32"}}
        assert calculate(config) == {"f": 212.0}

    @pytest.mark.parametrize("formula", ["a +* 2", "1 / 0", "sqrt(-1)", "log(0)", "a > 1", ""])
    def test_broken_formula_yields_zero(self, formula):
        assert calculate(_formula_config(formula, "a"), {"a": 2}) == {"result": 0}

    def test_broken_formula_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="calc_engine.engine"):
            calculate(_formula_config("a +* 2", "a"), {"a": 2})
        assert "Formula for result failed" in caplog.text

    def test_one_broken_formula_does_not_affect_others(self):
        config = {"inputs": [{"key": "a"}], "formulas": {"bad": "1 / 0", "good": "a * 2"}}
        assert calculate(config, {"a": 3}) == {"bad": 0, "good": 6.0}

    def test_evaluate_formula_raises(self):
        with pytest.raises(FormulaEvaluationError) as exc_info:
            evaluate_formula("1 / 0", {})
        assert exc_info.value.code == "FORMULA_EVALUATION_FAILED"


class TestFormulaSafety:
    @pytest.mark.parametrize(
        "formula",
        [
            "().__class__",
            "__import__('os')",
            "a.real",
            "a[0]",
            "'text' + 1",
            "[a for a in (1, 2)]",
            "lambda: 1",
            "sqrt(x=4)",
            "True + 1",
            "sqrt",
            "max(*a)",
        ],
    )
    def test_outside_grammar_yields_zero(self, formula):
        assert calculate(_formula_config(formula, "a"), {"a": 2}) == {"result": 0}

    def test_attribute_chain_has_no_side_effect(self, tmp_path):
        marker = tmp_path / "marker"
        formula = (
            "[c for c in ().__class__.__base__.__subclasses__() "
            "if c.__name__ == '_wrap_close'][0].__init__.__globals__['system']"
            f"('touch {marker}') + 1"
        )
        assert calculate(_formula_config(formula)) == {"result": 0}
        assert not marker.exists()

    def test_unsupported_syntax_message(self):
        with pytest.raises(FormulaEvaluationError, match="Unsupported"):
            evaluate_formula("a.real", {"a": 1.0})

    @pytest.mark.parametrize("formula", ["10**10**8", "9^9^9^9", "pow(10, 10^8)", "exp(1e6)"])
    def test_huge_powers_overflow_quickly(self, formula):
        started = time.monotonic()
        assert calculate(_formula_config(formula)) == {"result": 0}
        assert time.monotonic() - started < 5

    def test_overlong_formula_yields_zero(self):
        formula = " + ".join(["a"] * 600)
        assert calculate(_formula_config(formula, "a"), {"a": 1}) == {"result": 0}

    def test_huge_integer_literal_yields_zero(self):
        assert calculate(_formula_config("9" * 400)) == {"result": 0}

    def test_long_but_valid_formula(self):
        formula = " + ".join(["a"] * 50)
        assert calculate(_formula_config(formula, "a"), {"a": 1}) == {"result": 50.0}


# ═══════════════════════════════════════════════════════════════════════
# FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════


class TestFunctions:
    def test_number_to_words(self):
        result = calculate(_words_config(), {"number": "42", "mode": "words"})
        assert result == {"textResult": "Forty-two"}

    def test_absent_params_use_function_defaults(self):
        result = calculate(_words_config(), {"number": "1"})
        assert result == {"textResult": "One"}

    def test_config_language_is_injected(self):
        result = calculate(_words_config(language="ru"), {"number": "42"})
        assert result == {"textResult": "Сорок два"}

    def test_engine_default_language(self):
        engine = CalculationEngine(default_language="ru")
        assert engine.calculate(_words_config(), {"number": "2"}) == {"textResult": "Два"}

    def test_vat_rate_is_float_coerced(self):
        result = calculate(
            _words_config(), {"number": "1000", "mode": "currency_vat", "vatRate": "20%"}
        )
        assert result["calculatedTotal"] == 1200.0
        assert result["vatAmount"] == 200.0
        assert result["principalAmount"] == 1000.0
        assert result["textResult"].startswith("One thousand two hundred dollars")

    def test_multi_field_output_is_flattened(self):
        config = {
            "inputs": [{"key": "h", "default": 180}, {"key": "w", "default": 72.9}],
            "functions": {
                "bmi": {
                    "functionName": "bmiCalculator",
                    "params": {"height_value": "h", "weight_value": "w"},
                }
            },
        }
        # age and units are missing, so the function fails and adds nothing
        assert calculate(config) == {}

        config["inputs"] += [{"key": "age", "default": 30}, {"key": "hu", "default": "cm"},
                             {"key": "wu", "default": "kg"}]
        config["functions"]["bmi"]["params"].update(
            {"age": "age", "height_unit": "hu", "weight_unit": "wu"}
        )
        result = calculate(config)
        assert result["bmi"] == 22.5
        assert result["bmi_status"] == "normal"
        assert result["healthy_bmi_max"] == 25

    def test_scalar_output_stored_under_output_key(self):
        config = {
            "inputs": [{"key": "text"}],
            "functions": {"value": {"functionName": "wordsToNumber", "params": {"text": "text"}}},
        }
        assert calculate(config, {"text": "two thousand five"}) == {"value": 2005.0}

    def test_text_case_function(self):
        config = {
            "inputs": [{"key": "t"}, {"key": "m"}],
            "functions": {"out": {"functionName": "textCaseConverter",
                                  "params": {"text": "t", "mode": "m"}}},
        }
        assert calculate(config, {"t": "hello world", "m": "Title Case"}) == {
            "textResult": "Hello World"
        }

    def test_function_failure_isolated(self, caplog):
        config = _words_config(formulas={"double": "number * 2"})
        with caplog.at_level(logging.ERROR, logger="calc_engine.engine"):
            result = calculate(config, {"number": "abc"})
        assert result == {"double": 0.0}
        assert "Function numberToWords for textResult failed" in caplog.text

    def test_unknown_function_skipped(self):
        config = {"inputs": [], "functions": {"x": {"functionName": "nope", "params": {}}}}
        assert calculate(config) == {}

    def test_strict_mode_rejects_unknown_function(self):
        config = {"inputs": [], "functions": {"x": {"functionName": "nope", "params": {}}}}
        with pytest.raises(UnknownFunctionError, match="nope"):
            CalculationEngine(strict=True).calculate(config)

    def test_idempotent(self):
        config = _words_config(formulas={"n": "number + 1"})
        inputs = {"number": "99.5", "mode": "currency"}
        assert calculate(config, inputs) == calculate(config, inputs)


class TestRegistry:
    def test_lookup_known(self):
        entry = lookup("numberToWords")
        assert entry is not None
        assert entry.name is FunctionName.NUMBER_TO_WORDS

    def test_lookup_unknown(self):
        assert lookup("fooBar") is None

    def test_registered_names(self):
        assert set(registered_names()) == {
            "numberToWords", "textCaseConverter", "bmiCalculator", "wordsToNumber"
        }

    def test_scalar_function_has_no_output_model(self):
        assert lookup("wordsToNumber").output_model is None


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════


class TestConfig:
    def test_missing_sections_tolerated(self):
        assert calculate({"inputs": [{"key": "a"}]}, {"a": 1}) == {}

    def test_null_sections_tolerated(self):
        assert calculate({"inputs": None, "formulas": None, "functions": None}) == {}

    def test_duplicate_input_keys_rejected(self):
        with pytest.raises(InvalidConfigError, match="Invalid tool configuration") as exc_info:
            calculate({"inputs": [{"key": "a"}, {"key": "a"}]})
        assert exc_info.value.code == "INVALID_CONFIG"

    def test_wrong_shape_rejected(self):
        with pytest.raises(InvalidConfigError):
            calculate({"inputs": "a,b"})

    def test_outputs_do_not_filter(self):
        config = {"inputs": [], "formulas": {"a": "1", "b": "2"}, "outputs": [{"key": "a"}]}
        assert calculate(config) == {"a": 1.0, "b": 2.0}


# ═══════════════════════════════════════════════════════════════════════
# VALIDATE
# ═══════════════════════════════════════════════════════════════════════


class TestValidate:
    CONFIG = {"inputs": [{"key": "a"}, {"key": "b", "default": 2}, {"key": "c"}]}

    def test_all_good(self):
        result = validate(self.CONFIG, {"a": "1", "c": 3.5})
        assert result.valid is True
        assert result.errors == []

    def test_missing_input(self):
        result = validate(self.CONFIG, {"a": 1, "c": ""})
        assert result.valid is False
        assert result.errors == ["Missing required input: c"]
        assert result.findings[0].code == "MISSING_REQUIRED_INPUT"
        assert result.findings[0].field == "c"

    def test_invalid_number(self):
        result = validate(self.CONFIG, {"a": "abc", "c": 1})
        assert result.errors == ["Invalid number for input: a"]
        assert result.findings[0].code == "INVALID_NUMBER"

    def test_one_error_per_bad_input(self):
        result = validate(self.CONFIG, {"a": "abc", "b": "Infinity"})
        assert result.errors == [
            "Invalid number for input: a",
            "Invalid number for input: b",
            "Missing required input: c",
        ]

    def test_non_numeric_text_inputs_are_flagged(self):
        result = validate({"inputs": [{"key": "mode", "default": "words"}]})
        assert result.errors == ["Invalid number for input: mode"]

    def test_numeric_prefix_is_valid(self):
        assert validate({"inputs": [{"key": "a"}]}, {"a": "12px"}).valid is True

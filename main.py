#!/usr/bin/env python3
"""
Calc Engine — Entry Point
=========================

Prints worked examples of the catalog tools, or runs one tool on inputs
given on the command line.

Usage:
    python main.py                                   # Every tool's examples
    python main.py bmi-calculator                    # One tool's examples
    python main.py number-to-words number=42 mode=words
    CALC_ENGINE_LOG_LEVEL=DEBUG python main.py       # Verbose engine logs
"""

from __future__ import annotations

import sys
from typing import Any, Mapping

from calc_engine.catalog import Tool, load_tools, resolve_tool, suggest_tool, worked_examples
from calc_engine.config import configure_logging, load_settings
from calc_engine.engine import CalculationEngine

# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer ─────────────────────────────────────────────────


def _print_mapping(mapping: Mapping[str, Any], color: str = "") -> None:
    width = max((len(k) for k in mapping), default=0)
    for key, value in mapping.items():
        print(f"    {key:<{width}}  {color}{value}{_RESET if color else ''}")


def print_calculation(inputs: Mapping[str, Any], result: Mapping[str, Any]) -> None:
    print(f"  {_DIM}inputs{_RESET}")
    _print_mapping(inputs)
    print(f"  {_DIM}result{_RESET}")
    if result:
        _print_mapping(result, _GREEN)
    else:
        print(f"    {_RED}(no outputs){_RESET}")
    print()


def print_tool_header(tool: Tool) -> None:
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  {tool.name}{_RESET}  {_DIM}#{tool.tool_id} {tool.slug}{_RESET}")
    if tool.description:
        print(f"  {tool.description}")
    print(f"{'─' * _WIDTH}")


def parse_assignments(args: list[str]) -> dict[str, str]:
    """Turn ``key=value`` arguments into an input map.

    Raises:
        ValueError: An argument has no ``=``.
    """
    inputs: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {arg!r}")
        inputs[key] = value
    return inputs


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Run the demo. Returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings()
    configure_logging(settings)

    tools = load_tools(settings.tools_path)
    engine = CalculationEngine(strict=settings.strict, default_language=settings.default_language)

    if not argv:
        for tool in tools:
            print_tool_header(tool)
            for example in worked_examples(tool, engine):
                print_calculation(example.inputs, example.result)
        return 0

    match = resolve_tool(argv[0], tools)
    if match is None:
        suggestion = suggest_tool(argv[0], tools)
        print(f"{_RED}Unknown tool {argv[0]!r}.{_RESET} Did you mean {suggestion!r}?", file=sys.stderr)
        return 1

    tool = match.tool
    print_tool_header(tool)

    try:
        inputs = parse_assignments(argv[1:])
    except ValueError as exc:
        print(f"{_RED}{exc}{_RESET}", file=sys.stderr)
        return 2

    if not inputs:
        for example in worked_examples(tool, engine):
            print_calculation(example.inputs, example.result)
        return 0

    print_calculation(inputs, engine.calculate(tool.config, inputs))
    return 0


if __name__ == "__main__":
    sys.exit(main())

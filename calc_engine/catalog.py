"""
Tool catalog: calculator definitions and their worked examples.

Each tool bundles an engine configuration with a few example input sets.
Rendering those examples through the engine produces the sample results a
tool page shows before the user types anything.

Tools are addressed by numeric id or by slug. A reference that matches
neither exactly is fuzzy-matched against the slugs (SequenceMatcher), so
"number-to-word" or "bmi-calculater" still finds the right tool.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from .engine import CalculationEngine
from .models import EngineConfig, InputValue, ResultValue

logger = logging.getLogger(__name__)

# Minimum fuzzy-match score to accept (0.0 = no match, 1.0 = exact)
MATCH_THRESHOLD = 0.70

DEFAULT_TOOLS_PATH = Path(__file__).parent / "tools.json"


# ─── Data Structures ────────────────────────────────────────────────


class Tool(BaseModel):
    tool_id: int
    slug: str
    name: str
    description: str = ""
    config: EngineConfig
    examples: list[dict[str, InputValue]] = Field(default_factory=list)


@dataclass
class ToolMatch:
    """Result of a tool lookup."""

    original: str  # What the caller asked for
    tool: Tool
    confidence: float  # 1.0 for an exact id/slug match


@dataclass
class WorkedExample:
    inputs: dict[str, InputValue]
    result: dict[str, ResultValue]


# ─── Public API ──────────────────────────────────────────────────────


def load_tools(path: str | Path | None = None) -> list[Tool]:
    """Load tool definitions from a JSON file.

    Args:
        path: Path to a tools JSON list. Defaults to the bundled tools.json.

    Raises:
        pydantic.ValidationError: A tool definition is malformed.
    """
    resolved = DEFAULT_TOOLS_PATH if path is None else Path(path)

    with resolved.open(encoding="utf-8") as f:
        raw: list[dict[str, Any]] = json.load(f)

    tools = [Tool.model_validate(item) for item in raw]
    logger.info("Loaded %d tools from %s", len(tools), resolved)
    return tools


def resolve_tool(raw_ref: str, tools: list[Tool]) -> Optional[ToolMatch]:
    """Find a tool by id or slug, exactly first, then fuzzily.

    Returns:
        ToolMatch if resolved (fuzzy matches only above MATCH_THRESHOLD),
        None otherwise.
    """
    ref = str(raw_ref).strip().lower()

    # ── Step 1: Exact id or slug ────────────────────────────────────
    for tool in tools:
        if ref == str(tool.tool_id) or ref == tool.slug.lower():
            return ToolMatch(original=raw_ref, tool=tool, confidence=1.0)

    # ── Step 2: Fuzzy slug match ────────────────────────────────────
    best_match: Tool | None = None
    best_score = 0.0

    for tool in tools:
        score = SequenceMatcher(None, ref, tool.slug.lower()).ratio()
        if score > best_score:
            best_score = score
            best_match = tool

    if best_match and best_score >= MATCH_THRESHOLD:
        logger.info(
            "Tool %r fuzzy-matched to %r (confidence %.2f)", raw_ref, best_match.slug, best_score
        )
        return ToolMatch(original=raw_ref, tool=best_match, confidence=round(best_score, 4))

    return None


def suggest_tool(raw_ref: str, tools: list[Tool]) -> Optional[str]:
    """Closest slug to `raw_ref`, regardless of threshold (for error hints)."""
    ref = str(raw_ref).strip().lower()
    scored = [(SequenceMatcher(None, ref, t.slug.lower()).ratio(), t.slug) for t in tools]
    return max(scored)[1] if scored else None


def worked_examples(tool: Tool, engine: CalculationEngine | None = None) -> list[WorkedExample]:
    """Run every example input set of `tool` through the engine."""
    engine = engine or CalculationEngine()
    return [
        WorkedExample(inputs=dict(example), result=engine.calculate(tool.config, example))
        for example in tool.examples
    ]

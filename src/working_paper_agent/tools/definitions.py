"""Tool definitions for LLM function calling.

Schemas use the JSON-schema tool format the LLM client converts for its
provider: ``name``, ``description`` and ``input_schema``.
"""

from typing import Any

from working_paper_agent.models import AdjustmentType

GENERATE_WORKING_PAPER = "generate_xlsx_working_paper"

_ADJUSTMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "A Schedule M-1 book-tax adjustment",
    "properties": {
        "account": {
            "type": "string",
            "description": "Account name for the adjustment",
        },
        "type": {
            "type": "string",
            "enum": [member.value for member in AdjustmentType],
            "description": "Type of adjustment (Permanent or Temporary)",
        },
        "amount": {
            "type": "number",
            "description": "Adjustment amount",
        },
        "explanation": {
            "type": "string",
            "description": "Explanation for the adjustment",
        },
        "irs_rule_ref": {
            "type": "string",
            "description": "IRS rule reference for the adjustment, e.g. IRC §274(n)",
        },
        "m1_line": {
            "type": "string",
            "description": "Schedule M-1 line number for the adjustment",
        },
    },
    "required": ["account", "type", "amount", "explanation"],
}

_TRIAL_BALANCE_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "description": "One trial balance line as column name to value",
    },
}

GENERATE_WORKING_PAPER_TOOL: dict[str, Any] = {
    "name": GENERATE_WORKING_PAPER,
    "description": (
        "Generate an XLSX working paper with M-1 adjustments and trial balance data. "
        "Returns the path of the written file or an error message."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "adjustments": {
                "type": "array",
                "description": "List of M-1 adjustments",
                "items": _ADJUSTMENT_SCHEMA,
            },
            "currentTB": {
                **_TRIAL_BALANCE_SCHEMA,
                "description": "Current year trial balance rows",
            },
            "currentYear": {
                "type": "string",
                "description": "Current year label for the trial balance, e.g. 2023",
            },
            "lastYear": {
                "type": "string",
                "description": "Prior year label for the trial balance, e.g. 2022",
            },
            "priorTB": {
                **_TRIAL_BALANCE_SCHEMA,
                "description": "Prior year trial balance rows (optional)",
            },
            "outputPath": {
                "type": "string",
                "description": "Directory to save the working paper in (optional)",
            },
        },
        "required": ["adjustments", "currentTB", "currentYear", "lastYear"],
    },
}

WORKING_PAPER_TOOLS: list[dict[str, Any]] = [GENERATE_WORKING_PAPER_TOOL]

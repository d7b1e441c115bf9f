"""Data models for M-1 working paper generation.

Requests arriving from the model are validated here before they reach the
workbook writer. Results are returned by value as one of two frozen
dataclasses so callers always branch on ``success``.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from working_paper_agent.config.settings import DEFAULT_OUTPUT_DIR

WORKING_PAPER_FILENAME = "m1_working_paper.xlsx"

CellValue = str | int | float | bool | None
TrialBalanceRow = dict[str, CellValue]


class AdjustmentType(str, Enum):
    """Schedule M-1 adjustment classification."""

    PERMANENT = "Permanent"
    TEMPORARY = "Temporary"


class Adjustment(BaseModel):
    """A single book-tax difference proposed by the model."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    account: str
    type: AdjustmentType
    amount: Decimal
    explanation: str
    irs_rule_ref: str | None = None
    m1_line: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        # "permanent", " TEMPORARY " etc. map onto the enum; anything else fails
        if isinstance(value, str):
            for member in AdjustmentType:
                if value.strip().lower() == member.value.lower():
                    return member
        return value


class WorkingPaperRequest(BaseModel):
    """Validated input for :func:`generate_working_paper`.

    Accepts the camelCase keys used by the tool schema (``currentTB``,
    ``priorTB``, ``currentYear``, ``lastYear``, ``outputPath``) as well as
    the snake_case field names.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    adjustments: list[Adjustment]
    current_tb: list[TrialBalanceRow] = Field(alias="currentTB")
    prior_tb: list[TrialBalanceRow] = Field(default_factory=list, alias="priorTB")
    current_year: str = Field(alias="currentYear")
    last_year: str = Field(alias="lastYear")
    output_path: str = Field(default=DEFAULT_OUTPUT_DIR, alias="outputPath", min_length=1)

    @field_validator("current_year", "last_year", mode="before")
    @classmethod
    def _coerce_year_label(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, int | float):
            return str(value)
        return value

    @field_validator("output_path", mode="before")
    @classmethod
    def _coerce_output_path(cls, value: Any) -> Any:
        return str(value) if isinstance(value, Path) else value

    @property
    def output_file_path(self) -> str:
        """Where the workbook is written, spelled the way the caller gave the directory."""
        directory = self.output_path.rstrip("/")
        return f"{directory}/{WORKING_PAPER_FILENAME}"


@dataclass(frozen=True)
class WorkingPaperSuccess:
    """The workbook was written."""

    output_file_path: str
    success: Literal[True] = True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "outputFilePath": self.output_file_path}


@dataclass(frozen=True)
class WorkingPaperFailure:
    """The workbook could not be written."""

    error: str
    success: Literal[False] = False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.error}


WorkingPaperResult = WorkingPaperSuccess | WorkingPaperFailure

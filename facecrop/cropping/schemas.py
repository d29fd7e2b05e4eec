"""Pydantic models for detections, crop geometry and batch reports."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, computed_field


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int
    score: float


class CropRect(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    side: int

    def box(self) -> tuple:
        """Pillow crop box: (left, upper, right, lower)."""
        return (self.x, self.y, self.x + self.side, self.y + self.side)


class PathPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_path: Path


OutcomeStatus = Literal["succeeded", "skipped", "failed"]


class FileOutcome(BaseModel):
    input_path: Path
    output_path: Optional[Path] = None
    status: OutcomeStatus
    reason: Optional[str] = None
    error_kind: Optional[str] = None
    crop: Optional[CropRect] = None


class BatchReport(BaseModel):
    input_dir: Path
    output_dir: Optional[Path] = None
    outcomes: list[FileOutcome] = []

    def _count(self, status: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @computed_field
    @property
    def succeeded(self) -> int:
        return self._count("succeeded")

    @computed_field
    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @computed_field
    @property
    def failed(self) -> int:
        return self._count("failed")

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, model_validator


class DurationUnit(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def label(self) -> str:
        """Chinese display form used in normalized text."""
        return _UNIT_LABELS[self]


_UNIT_LABELS = {
    DurationUnit.MINUTE: "分钟",
    DurationUnit.HOUR: "小时",
    DurationUnit.DAY: "天",
    DurationUnit.WEEK: "周",
    DurationUnit.MONTH: "月",
    DurationUnit.YEAR: "年",
}

Number = Union[int, float]


class DurationRange(BaseModel):
    min: Number
    max: Number

    @model_validator(mode="before")
    @classmethod
    def _order_bounds(cls, data):
        # "5-3天" is stored as {min: 3, max: 5}
        if isinstance(data, dict) and "min" in data and "max" in data:
            lo, hi = data["min"], data["max"]
            if lo > hi:
                data = {**data, "min": hi, "max": lo}
        return data


DurationValue = Union[DurationRange, int, float]


@dataclass(frozen=True)
class DurationCandidate:
    start: int        # char offset in the normalized text
    end: int
    raw: str          # the matched surface span
    value: DurationValue
    unit: DurationUnit
    score: int

    @property
    def is_range(self) -> bool:
        return isinstance(self.value, DurationRange)


class ParseResult(BaseModel):
    complaint_text: str = ""
    duration_value: Optional[DurationValue] = None
    duration_unit: Optional[DurationUnit] = None
    duration_raw: Optional[str] = None
    normalized_text: str = ""
    confidence: float = 0.0
    failure_reason: Optional[str] = None

    @model_validator(mode="after")
    def _duration_fields_together(self):
        present = [
            self.duration_value is not None,
            self.duration_unit is not None,
            self.duration_raw is not None,
        ]
        if any(present) and not all(present):
            raise ValueError("duration_value, duration_unit and duration_raw must be set together")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("confidence must be within [0, 1]")
        return self

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

import pandas as pd

from scan_roi.exceptions import InvalidInputError


def _require_finite(name, value):
    if not math.isfinite(value):
        raise InvalidInputError(name, f"must be a finite number, got {value}")


def _require_non_negative(name, value):
    _require_finite(name, value)
    if value < 0:
        raise InvalidInputError(name, f"must be >= 0, got {value}")


def _require_headcount(name, value):
    _require_finite(name, value)
    if int(value) != value or value < 1:
        raise InvalidInputError(name, f"must be a whole number >= 1, got {value}")


# --- Input Parameters ---
@dataclass(frozen=True)
class TraditionalParams:
    personnel_count: int
    hourly_rate: float
    field_hours: float
    deliverable_hours: float
    monthly_project_count: float
    rework_percent: float

    def __post_init__(self):
        _require_headcount('personnel_count', self.personnel_count)
        for name in ('hourly_rate', 'field_hours', 'deliverable_hours'):
            _require_non_negative(name, getattr(self, name))
        _require_finite('monthly_project_count', self.monthly_project_count)
        _require_finite('rework_percent', self.rework_percent)
        if self.monthly_project_count <= 0:
            raise InvalidInputError('monthly_project_count', f"must be > 0, got {self.monthly_project_count}")
        if not 0 <= self.rework_percent <= 100:
            raise InvalidInputError('rework_percent', f"must be within [0, 100], got {self.rework_percent}")

    @property
    def total_hours(self) -> float:
        return self.field_hours + self.deliverable_hours

    @property
    def monthly_hours(self) -> float:
        return self.total_hours * self.monthly_project_count

    @property
    def monthly_cost(self) -> float:
        per_project = self.total_hours * self.hourly_rate * self.personnel_count
        return per_project * self.monthly_project_count


@dataclass(frozen=True)
class ScanningParams:
    """
    Technology-assisted profile. The three hour fields are always derived from
    a ``TraditionalParams`` and the investment is the list price of
    ``scanner_model``; ``scan_roi.scanning.derive_scanning_params`` is what
    enforces both. Building the record directly only checks ranges, so a
    caller doing that owns the price.
    """
    operator_count: int
    scan_hours: float
    processing_hours: float
    deliverable_hours: float
    initial_investment: float
    scanner_model: Optional[str] = None
    amortization_months: int = 36

    def __post_init__(self):
        _require_headcount('operator_count', self.operator_count)
        for name in ('scan_hours', 'processing_hours', 'deliverable_hours', 'initial_investment'):
            _require_non_negative(name, getattr(self, name))
        _require_headcount('amortization_months', self.amortization_months)

    @property
    def total_hours(self) -> float:
        return self.scan_hours + self.processing_hours + self.deliverable_hours

    def monthly_cost(self, traditional: TraditionalParams) -> float:
        # Hourly rate and project volume are shared with the traditional method
        per_project = self.total_hours * traditional.hourly_rate * self.operator_count
        return per_project * traditional.monthly_project_count

    @property
    def amortized_monthly_investment(self) -> float:
        return self.initial_investment / self.amortization_months


# --- Cost Projection ---
@dataclass(frozen=True)
class CostSeriesPoint:
    month_index: int
    traditional_cumulative: float
    scanning_cumulative: float


@dataclass(frozen=True)
class CostProjection:
    series: Tuple[CostSeriesPoint, ...]
    breakeven_month: Optional[float]

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame([asdict(p) for p in self.series],
                          columns=['month_index', 'traditional_cumulative', 'scanning_cumulative'])
        return df.set_index('month_index')

    def to_dict(self):
        return {
            'series': [asdict(p) for p in self.series],
            'breakeven_month': self.breakeven_month,
        }


# --- ROI Metrics ---
@dataclass(frozen=True)
class ROIMetrics:
    """Headline metrics. A metric is ``None`` when it could not be computed;
    ``errors`` then holds the reason under the metric's name."""
    time_efficiency_gain_percent: Optional[float]
    annual_roi_percent: Optional[float]
    five_year_roi_percent: Optional[float]
    monthly_time_savings_hours: float
    breakeven_month: Optional[float]
    traditional_monthly_cost: float
    scanning_monthly_cost: float
    rework_savings_hours: float
    rework_cost_savings: float
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def monthly_savings_delta(self) -> float:
        return self.traditional_monthly_cost - self.scanning_monthly_cost

    def to_dict(self):
        return asdict(self)


# --- Benefits ---
class BenefitKey(str, Enum):
    REWORK_REDUCTION = 'rework_reduction'
    DATA_ARCHIVAL = 'data_archival'
    CHANGE_MANAGEMENT = 'change_management'
    FABRICATION = 'fabrication'
    CONCRETE_FLOOR = 'concrete_floor'

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputError('benefit', f"unknown benefit key {value!r}") from None


@dataclass(frozen=True)
class BenefitToggleState:
    rework_reduction: bool = True
    data_archival: bool = True
    change_management: bool = True
    fabrication: bool = True
    concrete_floor: bool = True

    @classmethod
    def from_mapping(cls, toggles: Mapping):
        """Build from a partial ``{key: bool}`` mapping; missing keys default to included."""
        values = {BenefitKey.parse(k).value: bool(v) for k, v in toggles.items()}
        return cls(**values)

    @classmethod
    def excluding(cls, *keys):
        return cls.from_mapping({k: False for k in keys})

    def is_included(self, key: BenefitKey) -> bool:
        return getattr(self, BenefitKey(key).value)

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BenefitEstimates:
    """Annual monetary value of each secondary benefit."""
    rework_reduction: float
    data_archival: float
    change_management: float
    fabrication: float
    concrete_floor: float

    def __post_init__(self):
        for key in BenefitKey:
            _require_non_negative(key.value, getattr(self, key.value))

    def value_of(self, key: BenefitKey) -> float:
        return getattr(self, BenefitKey(key).value)

    def items(self):
        return [(key, self.value_of(key)) for key in BenefitKey]

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class EnhancedROI:
    """Enhanced figures; a figure that is None has its reason in ``errors``."""
    included_total: float
    enhanced_roi_percent: Optional[float]
    enhanced_payback_months: Optional[float]
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ReworkBreakdown:
    annual_rework_hours: float
    annual_rework_cost: float
    hours_saved: float
    cost_saved: float

    def to_dict(self):
        return asdict(self)

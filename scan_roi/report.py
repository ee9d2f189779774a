from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scan_roi import benefits, metrics, projection
from scan_roi.config import default_rework_reduction_percent, resolve_params
from scan_roi.models import (BenefitEstimates, BenefitToggleState, CostProjection, EnhancedROI,
                             ReworkBreakdown, ROIMetrics, ScanningParams, TraditionalParams)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calculation:
    traditional: TraditionalParams
    scanning: ScanningParams
    projection: CostProjection
    roi: ROIMetrics
    selected_rework_reduction_percent: float
    rework: ReworkBreakdown
    estimates: BenefitEstimates
    toggles: BenefitToggleState
    enhanced: EnhancedROI


def run_calculation(traditional: TraditionalParams, scanning: ScanningParams,
                    toggles: Optional[BenefitToggleState] = None,
                    selected_rework_reduction_percent=None, params=None) -> Calculation:
    """Run projection, ROI metrics and benefit aggregation for one input snapshot."""
    params = resolve_params(params)
    toggles = toggles or BenefitToggleState()
    if selected_rework_reduction_percent is None:
        selected_rework_reduction_percent = default_rework_reduction_percent(params)

    cost_projection = projection.project(traditional, scanning, params=params)
    roi = metrics.compute(traditional, scanning, params=params, projection=cost_projection)
    estimates = benefits.estimate(traditional, scanning, selected_rework_reduction_percent, roi, params=params)
    enhanced = benefits.combine(estimates, toggles, roi, scanning.initial_investment)

    return Calculation(
        traditional=traditional,
        scanning=scanning,
        projection=cost_projection,
        roi=roi,
        selected_rework_reduction_percent=selected_rework_reduction_percent,
        rework=benefits.rework_breakdown(traditional, selected_rework_reduction_percent, params),
        estimates=estimates,
        toggles=toggles,
        enhanced=enhanced,
    )


def build_summary(calc: Calculation, include_series=False):
    """
    Flat, JSON-serializable record of the inputs and results, grouped the way a
    downstream system (e.g. a CRM) receives it. Values are left unrounded.
    """
    t, s, roi = calc.traditional, calc.scanning, calc.roi
    summary = {
        'traditional_setup': {
            'monthly_projects': t.monthly_project_count,
            'personnel_count': t.personnel_count,
            'hourly_rate': t.hourly_rate,
            'field_hours': t.field_hours,
            'deliverable_hours': t.deliverable_hours,
            'rework_percent': t.rework_percent,
        },
        'scanning_method': {
            'scanner_model': s.scanner_model,
            'operator_count': s.operator_count,
            'scan_hours': s.scan_hours,
            'processing_hours': s.processing_hours,
            'deliverable_hours': s.deliverable_hours,
            'initial_investment': s.initial_investment,
        },
        'roi': roi.to_dict(),
        'benefits': {
            'selected_rework_reduction_percent': calc.selected_rework_reduction_percent,
            'rework': calc.rework.to_dict(),
            'estimates': calc.estimates.to_dict(),
            'included': calc.toggles.to_dict(),
        },
        'enhanced': {
            **calc.enhanced.to_dict(),
            'standard_payback_months': roi.breakeven_month,
        },
    }
    if include_series:
        summary['series'] = calc.projection.to_dict()['series']
    return summary

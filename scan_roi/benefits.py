"""
Secondary benefits of scanning beyond labor savings.

Each estimate is an annual dollar value from a simple ratio model over the
traditional operating profile; the ratios and fixed costs come from the
assumption parameters (see ``scan_roi.config``) so a caller can override them.
No estimate reads another one.
"""
import logging
import math

import pandas as pd

from scan_roi.config import default_rework_reduction_percent, resolve_params
from scan_roi.exceptions import InvalidInputError
from scan_roi.models import (BenefitEstimates, BenefitKey, BenefitToggleState, EnhancedROI,
                             ReworkBreakdown, ROIMetrics, ScanningParams, TraditionalParams)

logger = logging.getLogger(__name__)

BENEFIT_LABELS = {
    BenefitKey.REWORK_REDUCTION: 'Rework Reduction',
    BenefitKey.DATA_ARCHIVAL: 'Data Archival Value',
    BenefitKey.CHANGE_MANAGEMENT: 'Change Management',
    BenefitKey.FABRICATION: 'Fabrication Savings',
    BenefitKey.CONCRETE_FLOOR: 'Concrete Floor Analysis',
}


def _round_half_up(x):
    return math.floor(x + 0.5)


def _annual_projects(traditional):
    return traditional.monthly_project_count * 12


def _annual_labor_cost(traditional, hours):
    return hours * traditional.hourly_rate * traditional.personnel_count


def check_reduction_percent(selected, params=None):
    params = resolve_params(params)
    low = params['rework_reduction_min_percent']
    high = params['rework_reduction_max_percent']
    if not low <= selected <= high:
        raise InvalidInputError('selected_rework_reduction_percent',
                                f"must be within [{low}, {high}], got {selected}")
    return selected


# --- Individual Estimates ---
def rework_breakdown(traditional: TraditionalParams, selected_rework_reduction_percent, params=None):
    check_reduction_percent(selected_rework_reduction_percent, params)
    annual_rework_hours = traditional.monthly_hours * 12 * traditional.rework_percent / 100
    hours_saved = annual_rework_hours * selected_rework_reduction_percent / 100
    return ReworkBreakdown(
        annual_rework_hours=annual_rework_hours,
        annual_rework_cost=_annual_labor_cost(traditional, annual_rework_hours),
        hours_saved=hours_saved,
        cost_saved=_annual_labor_cost(traditional, hours_saved),
    )


def data_archival_value(traditional, params):
    # Annual project value is estimated as a multiple of annual labor cost
    annual_labor_cost = _annual_labor_cost(traditional, traditional.monthly_hours * 12)
    annual_project_value = annual_labor_cost * params['archival_project_value_multiplier']
    return annual_project_value * params['archival_value_rate']


def change_management_savings(traditional, params):
    projects = _annual_projects(traditional) * params['change_mgmt_project_share']
    hours_saved = traditional.total_hours * params['change_mgmt_hours_saved_share'] * projects
    return _annual_labor_cost(traditional, hours_saved)


def fabrication_savings(traditional, params):
    projects = max(1, _round_half_up(_annual_projects(traditional) * params['fabrication_project_share']))
    return projects * params['average_fabrication_cost'] * params['fabrication_waste_reduction']


def concrete_floor_savings(traditional, params):
    projects = max(1, _round_half_up(_annual_projects(traditional) * params['concrete_floor_project_share']))
    per_analysis = params['traditional_floor_analysis_cost'] - params['scanning_floor_analysis_cost']
    # A scanning analysis that costs more than the traditional one saves nothing
    return projects * max(0.0, per_analysis)


def annual_labor_savings(traditional: TraditionalParams, scanning: ScanningParams):
    monthly_hours_saved = traditional.monthly_hours - scanning.total_hours * traditional.monthly_project_count
    return _annual_labor_cost(traditional, monthly_hours_saved * 12)


# --- Aggregation ---
def estimate(traditional: TraditionalParams, scanning: ScanningParams,
             selected_rework_reduction_percent=None, roi: ROIMetrics = None, params=None) -> BenefitEstimates:
    """
    Annual value of each secondary benefit.

    ``selected_rework_reduction_percent`` defaults to the midpoint of the
    configured range. ``scanning`` and ``roi`` are part of the call contract;
    none of the current policy formulas read them.
    """
    params = resolve_params(params)
    if selected_rework_reduction_percent is None:
        selected_rework_reduction_percent = default_rework_reduction_percent(params)

    rework = rework_breakdown(traditional, selected_rework_reduction_percent, params)
    estimates = BenefitEstimates(
        rework_reduction=rework.cost_saved,
        data_archival=data_archival_value(traditional, params),
        change_management=change_management_savings(traditional, params),
        fabrication=fabrication_savings(traditional, params),
        concrete_floor=concrete_floor_savings(traditional, params),
    )
    logger.debug("Benefit estimates: %s", estimates)
    return estimates


def included_total(estimates: BenefitEstimates, toggles: BenefitToggleState):
    return sum(value for key, value in estimates.items() if toggles.is_included(key))


def combine(estimates: BenefitEstimates, toggles: BenefitToggleState, roi: ROIMetrics, initial_investment) -> EnhancedROI:
    """
    Fold the included benefits into the ROI and payback figures.

    Enhanced ROI is None when the investment is zero or the annual ROI is
    itself undetermined; enhanced payback is None when the combined monthly
    savings are not positive. Either way the reason is kept in ``errors``.
    """
    total = included_total(estimates, toggles)
    errors = {}

    if initial_investment == 0:
        enhanced_roi = None
        errors['enhanced_roi_percent'] = "initial_investment: is zero; ROI is undefined"
    elif roi.annual_roi_percent is None:
        enhanced_roi = None
        errors['enhanced_roi_percent'] = "annual_roi_percent is not determinable"
    else:
        enhanced_roi = roi.annual_roi_percent + total / initial_investment * 100

    monthly_savings = roi.monthly_savings_delta + total / 12
    if monthly_savings <= 0:
        logger.warning("Enhanced payback not determinable: combined monthly savings %.2f", monthly_savings)
        enhanced_payback = None
        errors['enhanced_payback_months'] = f"combined monthly savings {monthly_savings:.2f} are not positive"
    else:
        enhanced_payback = initial_investment / monthly_savings

    return EnhancedROI(included_total=total, enhanced_roi_percent=enhanced_roi,
                       enhanced_payback_months=enhanced_payback, errors=errors)


def savings_breakdown(traditional: TraditionalParams, scanning: ScanningParams,
                      estimates: BenefitEstimates, toggles: BenefitToggleState = None) -> pd.DataFrame:
    """Annual labor savings followed by each benefit, for charting or export."""
    toggles = toggles or BenefitToggleState()
    rows = [{'Benefit': 'Labor Savings', 'Key': 'labor', 'Annual Value': annual_labor_savings(traditional, scanning),
             'Included': True}]
    for key, value in estimates.items():
        rows.append({'Benefit': BENEFIT_LABELS[key], 'Key': key.value, 'Annual Value': value,
                     'Included': toggles.is_included(key)})
    return pd.DataFrame(rows, columns=['Benefit', 'Key', 'Annual Value', 'Included'])

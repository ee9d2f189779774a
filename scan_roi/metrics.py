import logging

from scan_roi.config import resolve_params
from scan_roi.exceptions import InvalidInputError
from scan_roi.models import ROIMetrics, ScanningParams, TraditionalParams
from scan_roi.projection import project

logger = logging.getLogger(__name__)


# --- Single Metrics ---
def time_efficiency_gain_percent(traditional_total_hours, scanning_total_hours):
    if traditional_total_hours == 0:
        raise InvalidInputError('traditional_total_hours', "is zero; time efficiency gain is undefined")
    return (traditional_total_hours - scanning_total_hours) / traditional_total_hours * 100


def annual_roi_percent(monthly_savings, initial_investment):
    if initial_investment == 0:
        raise InvalidInputError('initial_investment', "is zero; ROI is undefined")
    return monthly_savings * 12 / initial_investment * 100


def five_year_roi_percent(monthly_savings, initial_investment, months=60):
    if initial_investment == 0:
        raise InvalidInputError('initial_investment', "is zero; ROI is undefined")
    return (monthly_savings * months - initial_investment) / initial_investment * 100


def rework_savings(traditional: TraditionalParams, reduction_factor=0.5):
    """
    Monthly rework hours and cost avoided. The basis is the traditional method's
    own monthly hours, not the difference between the two methods.
    """
    rework_hours = traditional.monthly_hours * traditional.rework_percent / 100
    hours_saved = rework_hours * reduction_factor
    cost_saved = hours_saved * traditional.hourly_rate * traditional.personnel_count
    return hours_saved, cost_saved


# --- All Metrics ---
def compute(traditional: TraditionalParams, scanning: ScanningParams, params=None, projection=None) -> ROIMetrics:
    """
    Headline ROI metrics for one input snapshot.

    A metric whose inputs make it undefined (zero traditional hours, zero
    investment) is reported as None with the reason in ``errors``; the remaining
    metrics are still computed. Pass ``projection`` to reuse an already built
    cost projection for the breakeven month.
    """
    params = resolve_params(params)
    traditional_monthly_cost = traditional.monthly_cost
    scanning_monthly_cost = scanning.monthly_cost(traditional)
    monthly_savings = traditional_monthly_cost - scanning_monthly_cost

    errors = {}

    def guarded(name, func, *args):
        try:
            return func(*args)
        except InvalidInputError as e:
            logger.warning("%s not determinable: %s", name, e)
            errors[name] = str(e)
            return None

    gain = guarded('time_efficiency_gain_percent', time_efficiency_gain_percent,
                   traditional.total_hours, scanning.total_hours)
    annual_roi = guarded('annual_roi_percent', annual_roi_percent,
                         monthly_savings, scanning.initial_investment)
    five_year_roi = guarded('five_year_roi_percent', five_year_roi_percent,
                            monthly_savings, scanning.initial_investment, params['five_year_months'])

    monthly_time_savings = (traditional.total_hours - scanning.total_hours) * traditional.monthly_project_count
    rework_hours_saved, rework_cost_saved = rework_savings(traditional, params['rework_reduction_factor'])

    if projection is None:
        projection = project(traditional, scanning, params=params)

    return ROIMetrics(
        time_efficiency_gain_percent=gain,
        annual_roi_percent=annual_roi,
        five_year_roi_percent=five_year_roi,
        monthly_time_savings_hours=monthly_time_savings,
        breakeven_month=projection.breakeven_month,
        traditional_monthly_cost=traditional_monthly_cost,
        scanning_monthly_cost=scanning_monthly_cost,
        rework_savings_hours=rework_hours_saved,
        rework_cost_savings=rework_cost_saved,
        errors=errors,
    )

"""
Cumulative cost projection for the traditional and scanning methods, and the
month at which the two cumulative cost curves cross.
"""
import logging
import math

import pandas as pd

from scan_roi.config import resolve_params
from scan_roi.exceptions import InvalidInputError
from scan_roi.models import CostProjection, CostSeriesPoint, ScanningParams, TraditionalParams

logger = logging.getLogger(__name__)

TRADITIONAL_COLUMN = 'traditional_cumulative'
SCANNING_COLUMN = 'scanning_cumulative'


def build_cost_frame(traditional_monthly_cost, scanning_monthly_cost, initial_investment, horizon_months=36):
    if int(horizon_months) != horizon_months or horizon_months < 1:
        raise InvalidInputError('horizon_months', f"must be a whole number >= 1, got {horizon_months}")

    index = pd.RangeIndex(1, int(horizon_months) + 1, name='month_index')
    months = pd.Series(index, index=index)

    df = pd.DataFrame({
        TRADITIONAL_COLUMN: traditional_monthly_cost * months,
        # Capital cost is added in full to every month, not amortized
        SCANNING_COLUMN: scanning_monthly_cost * months + initial_investment,
    })
    return df.astype(float)


def interpolate_crossover(m1, t1, t2, s1, s2):
    """
    Fractional month between ``m1`` and ``m1 + 1`` where the straight lines
    (m1, t1)-(m1+1, t2) and (m1, s1)-(m1+1, s2) meet, or None for parallel lines.
    """
    denominator = (t2 - t1) - (s2 - s1)
    if denominator == 0 or not math.isfinite(denominator):
        return None
    return m1 + (s1 - t1) / denominator


def find_crossover(df):
    """
    First month pair (i, i+1) where the traditional curve goes from below the
    scanning curve to above it, interpolated to a fractional month.
    """
    trad = df[TRADITIONAL_COLUMN]
    scan = df[SCANNING_COLUMN]

    # Strictly below at month i and strictly above at month i+1
    crossing_mask = (trad < scan) & (trad > scan).shift(-1, fill_value=False)

    for m1 in crossing_mask[crossing_mask].index:
        m2 = m1 + 1
        month = interpolate_crossover(m1, trad.loc[m1], trad.loc[m2], scan.loc[m1], scan.loc[m2])
        if month is None:
            # Straight cost lines never get here; hand-built frames with non-finite values can
            logger.warning("Degenerate slope between months %d and %d; skipping interval", m1, m2)
            continue
        logger.debug("Cost curves cross between months %d and %d at %.4f", m1, m2, month)
        return float(month)
    return None


def theoretical_breakeven(traditional_monthly_cost, scanning_monthly_cost, initial_investment):
    monthly_savings = traditional_monthly_cost - scanning_monthly_cost
    if monthly_savings <= 0:
        return None
    months = initial_investment / monthly_savings
    return months if months > 0 else None


def project(traditional: TraditionalParams, scanning: ScanningParams, horizon_months=None, params=None):
    """
    Build the month-by-month cumulative cost series for both methods and the
    breakeven month.

    The breakeven month comes from the first crossover inside the horizon; if the
    curves never cross there it falls back to ``investment / monthly savings``,
    and is None when scanning never becomes cheaper.
    """
    if horizon_months is None:
        horizon_months = resolve_params(params)['horizon_months']

    traditional_monthly_cost = traditional.monthly_cost
    scanning_monthly_cost = scanning.monthly_cost(traditional)
    logger.debug("Monthly cost: traditional %.2f, scanning %.2f", traditional_monthly_cost, scanning_monthly_cost)

    df = build_cost_frame(traditional_monthly_cost, scanning_monthly_cost,
                          scanning.initial_investment, horizon_months)

    breakeven_month = find_crossover(df)
    if breakeven_month is None:
        breakeven_month = theoretical_breakeven(traditional_monthly_cost, scanning_monthly_cost,
                                                scanning.initial_investment)
        if breakeven_month is None:
            logger.warning("No breakeven: scanning never becomes cheaper than the traditional method")

    series = tuple(
        CostSeriesPoint(month_index=int(month), traditional_cumulative=float(row[TRADITIONAL_COLUMN]),
                        scanning_cumulative=float(row[SCANNING_COLUMN]))
        for month, row in df.iterrows()
    )
    return CostProjection(series=series, breakeven_month=breakeven_month)

import logging
import math
from pathlib import Path

import pandas as pd

from scan_roi.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# --- Scanner Price List ---
SCANNER_PRICE_LIST = {
    'X9 Core': 60_000,
    'X9 Premium': 72_000,
}
DEFAULT_SCANNER_MODEL = 'X9 Core'

PARAMS_SHEET_NAME = 'Input_Parameters'

MONTH_COUNT_PARAMS = ('horizon_months', 'amortization_months', 'five_year_months')


# --- Default Assumptions ---
def get_default_params():
    # Flat dictionary so a single override sheet can replace any of them
    params = {
        # Projection
        'horizon_months': 36,
        'amortization_months': 36,
        'five_year_months': 60,

        # ROI metrics
        'rework_reduction_factor': 0.5,  # 50% of traditional rework avoided

        # Scanning hours derived from traditional hours
        'scan_hours_ratio': 1 / 3,
        'processing_hours_ratio': 0.25,  # of scan hours
        'deliverable_hours_ratio': 0.10,  # of traditional deliverable hours

        # Selectable rework reduction (%)
        'rework_reduction_min_percent': 40,
        'rework_reduction_max_percent': 80,

        # Data archival
        'archival_project_value_multiplier': 5,
        'archival_value_rate': 0.05,

        # Change management
        'change_mgmt_project_share': 0.10,
        'change_mgmt_hours_saved_share': 0.50,

        # Fabrication
        'fabrication_project_share': 0.30,
        'average_fabrication_cost': 35_000,
        'fabrication_waste_reduction': 0.15,

        # Concrete floor flatness/levelness analysis
        'concrete_floor_project_share': 0.20,
        'traditional_floor_analysis_cost': 2_500,
        'scanning_floor_analysis_cost': 800,
    }
    return params


def default_rework_reduction_percent(params=None):
    """Midpoint of the configured selectable range."""
    params = resolve_params(params)
    return (params['rework_reduction_min_percent'] + params['rework_reduction_max_percent']) / 2


def resolve_params(overrides=None):
    params = get_default_params()
    if overrides:
        params.update(overrides)
    return params


# --- Override Files ---
def _read_params_frame(path):
    if path.suffix.lower() == '.xlsx':
        return pd.read_excel(path, sheet_name=PARAMS_SHEET_NAME)
    return pd.read_csv(path)


def load_params(path):
    """
    Read assumption overrides from an ``Input_Parameters`` sheet (.xlsx) or a CSV
    file with ``Parameter_Name`` and ``Value`` columns, merged over the defaults.

    Extra columns (``Parameter_Category``, ``Unit``) are allowed and ignored.
    """
    path = Path(path)
    try:
        df_params = _read_params_frame(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Error reading parameter file {path}: {e}") from e

    missing = {'Parameter_Name', 'Value'} - set(df_params.columns)
    if missing:
        raise ConfigurationError(f"{path} is missing column(s): {', '.join(sorted(missing))}")

    params = get_default_params()
    for _, row in df_params.iterrows():
        name = str(row['Parameter_Name']).strip()
        if name not in params:
            logger.warning("Ignoring unknown parameter %r in %s", name, path)
            continue
        value = pd.to_numeric(row['Value'], errors='coerce')
        if pd.isna(value) or not math.isfinite(value):
            raise ConfigurationError(f"Parameter {name!r} in {path} is not a finite number: {row['Value']!r}")
        if name in MONTH_COUNT_PARAMS and not float(value).is_integer():
            raise ConfigurationError(f"Parameter {name!r} in {path} must be a whole number of months, got {row['Value']!r}")
        params[name] = int(value) if isinstance(params[name], int) and float(value).is_integer() else float(value)
        logger.debug("Override %s = %s", name, params[name])

    for name in MONTH_COUNT_PARAMS:
        if params[name] < 1:
            raise ConfigurationError(f"Parameter {name!r} in {path} must be at least 1 month, got {params[name]}")

    logger.info("Loaded %d parameter row(s) from %s", len(df_params), path)
    return params

"""
Cost, breakeven and ROI engine comparing a traditional labor-based measuring
process with 3D laser scanning.
"""
from scan_roi.benefits import combine, estimate
from scan_roi.config import SCANNER_PRICE_LIST, get_default_params, load_params
from scan_roi.exceptions import ConfigurationError, InvalidInputError, ScanRoiError, UnknownScannerModelError
from scan_roi.metrics import compute
from scan_roi.models import (BenefitEstimates, BenefitKey, BenefitToggleState, CostProjection, CostSeriesPoint,
                             EnhancedROI, ReworkBreakdown, ROIMetrics, ScanningParams, TraditionalParams)
from scan_roi.projection import project
from scan_roi.report import Calculation, build_summary, run_calculation
from scan_roi.scanning import derive_scanning_params, investment_for_model

__version__ = "0.1.0"

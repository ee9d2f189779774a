import logging

from scan_roi.config import DEFAULT_SCANNER_MODEL, SCANNER_PRICE_LIST, resolve_params
from scan_roi.exceptions import UnknownScannerModelError
from scan_roi.models import ScanningParams, TraditionalParams

logger = logging.getLogger(__name__)


def investment_for_model(model, price_list=None):
    price_list = SCANNER_PRICE_LIST if price_list is None else price_list
    try:
        return float(price_list[model])
    except KeyError:
        raise UnknownScannerModelError(model, price_list) from None


def derive_scanning_params(traditional: TraditionalParams, model=DEFAULT_SCANNER_MODEL,
                           operator_count=1, params=None, price_list=None) -> ScanningParams:
    """
    Build the scanning profile that goes with ``traditional``.

    Scan, processing and deliverable hours always follow the traditional hours
    by fixed ratios, and the investment is always the list price of ``model``;
    call this again whenever either input changes instead of editing fields.
    """
    params = resolve_params(params)
    scan_hours = traditional.field_hours * params['scan_hours_ratio']
    processing_hours = scan_hours * params['processing_hours_ratio']
    deliverable_hours = traditional.deliverable_hours * params['deliverable_hours_ratio']

    scanning = ScanningParams(
        operator_count=operator_count,
        scan_hours=scan_hours,
        processing_hours=processing_hours,
        deliverable_hours=deliverable_hours,
        initial_investment=investment_for_model(model, price_list),
        scanner_model=model,
        amortization_months=params['amortization_months'],
    )
    logger.debug("Derived scanning profile for %s: %.2f scan / %.2f processing / %.2f deliverable hours",
                 model, scan_hours, processing_hours, deliverable_hours)
    return scanning

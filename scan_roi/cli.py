import argparse
import json
import logging
import sys

from scan_roi.config import DEFAULT_SCANNER_MODEL, SCANNER_PRICE_LIST, get_default_params, load_params
from scan_roi.exceptions import ScanRoiError
from scan_roi.models import BenefitKey, BenefitToggleState, TraditionalParams
from scan_roi.report import build_summary, run_calculation
from scan_roi.scanning import derive_scanning_params

logger = logging.getLogger("scan_roi")


def _configure_logging(verbose):
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s - %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser():
    ap = argparse.ArgumentParser(prog="scan-roi", description="Traditional vs. 3D scanning ROI calculator")
    ap.add_argument("--personnel", type=int, default=2, help="Traditional survey personnel per project")
    ap.add_argument("--hourly-rate", type=float, default=65.0)
    ap.add_argument("--field-hours", type=float, default=24.0, help="Field measurement hours per project")
    ap.add_argument("--deliverable-hours", type=float, default=40.0, help="Deliverable hours per project")
    ap.add_argument("--projects", type=float, default=8.0, help="Projects per month")
    ap.add_argument("--rework-percent", type=float, default=15.0)
    ap.add_argument("--model", default=DEFAULT_SCANNER_MODEL, choices=sorted(SCANNER_PRICE_LIST))
    ap.add_argument("--operators", type=int, default=1)
    ap.add_argument("--reduction", type=float, default=None,
                    help="Rework reduction percent for the benefit analysis (default: midpoint of range)")
    ap.add_argument("--exclude", nargs="*", default=[], choices=[k.value for k in BenefitKey],
                    help="Benefits to leave out of the enhanced ROI")
    ap.add_argument("--params", help="CSV/XLSX file of assumption overrides (Parameter_Name, Value)")
    ap.add_argument("--horizon", type=int, default=None, help="Projection length in months")
    ap.add_argument("--series", action="store_true", help="Include the monthly cost series in the report")
    ap.add_argument("--report", help="Write results JSON here (default: stdout)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        params = load_params(args.params) if args.params else get_default_params()
        if args.horizon is not None:
            params['horizon_months'] = args.horizon

        traditional = TraditionalParams(
            personnel_count=args.personnel,
            hourly_rate=args.hourly_rate,
            field_hours=args.field_hours,
            deliverable_hours=args.deliverable_hours,
            monthly_project_count=args.projects,
            rework_percent=args.rework_percent,
        )
        scanning = derive_scanning_params(traditional, args.model, args.operators, params)
        calc = run_calculation(traditional, scanning, BenefitToggleState.excluding(*args.exclude),
                               args.reduction, params)
    except ScanRoiError as e:
        logger.error("%s", e)
        return 2

    out = build_summary(calc, include_series=args.series)
    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            json.dump(out, f, indent=2)
        logger.info("Wrote report to %s", args.report)
    else:
        json.dump(out, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return 0

from dataclasses import replace

import pytest

from scan_roi.benefits import (annual_labor_savings, combine, estimate, included_total, rework_breakdown,
                               savings_breakdown)
from scan_roi.exceptions import InvalidInputError
from scan_roi.metrics import compute
from scan_roi.models import BenefitEstimates, BenefitKey, BenefitToggleState
from scan_roi.scanning import derive_scanning_params

TOTAL_AT_60 = 71_884.8 + 199_680 + 39_936 + 152_250 + 32_300


@pytest.fixture
def roi(traditional, scanning):
    return compute(traditional, scanning)


@pytest.fixture
def estimates(traditional, scanning, roi):
    return estimate(traditional, scanning, 60, roi)


def test_estimates_at_default_reduction(estimates):
    assert estimates.rework_reduction == pytest.approx(71_884.8)
    assert estimates.data_archival == pytest.approx(199_680)
    assert estimates.change_management == pytest.approx(39_936)
    assert estimates.fabrication == pytest.approx(152_250)
    assert estimates.concrete_floor == pytest.approx(32_300)


def test_default_reduction_is_midpoint(traditional, scanning, estimates):
    assert estimate(traditional, scanning) == estimates


def test_reduction_only_moves_rework_estimate(traditional, scanning, estimates):
    low = estimate(traditional, scanning, 40)
    assert low.rework_reduction == pytest.approx(921.6 * 0.4 * 130)
    for key in BenefitKey:
        if key is not BenefitKey.REWORK_REDUCTION:
            assert low.value_of(key) == estimates.value_of(key)


def test_reduction_outside_range(traditional, scanning):
    with pytest.raises(InvalidInputError):
        estimate(traditional, scanning, 90)
    with pytest.raises(InvalidInputError):
        estimate(traditional, scanning, 39.9)


def test_rework_breakdown(traditional):
    rework = rework_breakdown(traditional, 60)
    assert rework.annual_rework_hours == pytest.approx(921.6)
    assert rework.annual_rework_cost == pytest.approx(119_808)
    assert rework.hours_saved == pytest.approx(552.96)
    assert rework.cost_saved == pytest.approx(71_884.8)


def test_project_counts_round_half_up(traditional, scanning):
    # 1.875 projects/month -> 22.5 a year -> 4.5 floor analyses rounds to 5
    shop = replace(traditional, monthly_project_count=1.875)
    assert estimate(shop, scanning).concrete_floor == pytest.approx(5 * 1_700)


def test_at_least_one_project(traditional, scanning):
    shop = replace(traditional, monthly_project_count=0.01)
    result = estimate(shop, scanning)
    assert result.fabrication == pytest.approx(35_000 * 0.15)
    assert result.concrete_floor == pytest.approx(1_700)


def test_policy_constant_overrides(traditional, scanning):
    result = estimate(traditional, scanning, params={'average_fabrication_cost': 10_000,
                                                     'scanning_floor_analysis_cost': 3_000})
    assert result.fabrication == pytest.approx(29 * 10_000 * 0.15)
    assert result.concrete_floor == 0


def test_combine_all_included(estimates, roi):
    enhanced = combine(estimates, BenefitToggleState(), roi, 60_000)
    assert enhanced.included_total == pytest.approx(TOTAL_AT_60)
    assert enhanced.enhanced_roi_percent == pytest.approx(1185.6 + TOTAL_AT_60 / 60_000 * 100)
    assert enhanced.enhanced_payback_months == pytest.approx(60_000 / (59_280 + TOTAL_AT_60 / 12))
    assert enhanced.errors == {}


def test_combine_all_excluded_equals_annual_roi(estimates, roi):
    toggles = BenefitToggleState.excluding(*BenefitKey)
    enhanced = combine(estimates, toggles, roi, 60_000)
    assert enhanced.included_total == 0
    assert enhanced.enhanced_roi_percent == roi.annual_roi_percent
    assert enhanced.enhanced_payback_months == pytest.approx(roi.breakeven_month)


def test_combine_partial(estimates, roi):
    toggles = BenefitToggleState(fabrication=False, data_archival=False)
    assert included_total(estimates, toggles) == pytest.approx(71_884.8 + 39_936 + 32_300)


def test_toggle_state_defaults_and_mapping():
    toggles = BenefitToggleState.from_mapping({'fabrication': False, BenefitKey.CONCRETE_FLOOR: 0})
    assert toggles.is_included(BenefitKey.REWORK_REDUCTION)
    assert not toggles.is_included('fabrication')
    assert not toggles.is_included(BenefitKey.CONCRETE_FLOOR)
    with pytest.raises(InvalidInputError):
        BenefitToggleState.from_mapping({'lidar': True})


def test_payback_not_determinable(traditional):
    scanning = derive_scanning_params(traditional, operator_count=10)
    roi = compute(traditional, scanning)
    estimates = estimate(traditional, scanning, roi=roi)

    none_included = combine(estimates, BenefitToggleState.excluding(*BenefitKey), roi, 60_000)
    assert none_included.enhanced_payback_months is None
    assert 'not positive' in none_included.errors['enhanced_payback_months']
    assert none_included.enhanced_roi_percent < 0

    # Benefits outweigh the higher operating cost
    all_included = combine(estimates, BenefitToggleState(), roi, 60_000)
    assert all_included.enhanced_payback_months > 0


def test_enhanced_roi_undetermined_without_investment(estimates, roi):
    enhanced = combine(estimates, BenefitToggleState(), roi, 0)
    assert enhanced.enhanced_roi_percent is None
    assert 'initial_investment' in enhanced.errors['enhanced_roi_percent']
    assert 'enhanced_payback_months' not in enhanced.errors


def test_estimates_must_be_non_negative():
    with pytest.raises(InvalidInputError):
        BenefitEstimates(rework_reduction=-1, data_archival=0, change_management=0,
                         fabrication=0, concrete_floor=0)


def test_savings_breakdown(traditional, scanning, estimates):
    df = savings_breakdown(traditional, scanning, estimates, BenefitToggleState(fabrication=False))

    assert list(df['Key']) == ['labor'] + [k.value for k in BenefitKey]
    assert df.loc[0, 'Annual Value'] == pytest.approx(annual_labor_savings(traditional, scanning))
    assert df.loc[0, 'Annual Value'] == pytest.approx(624_000)
    assert not df.set_index('Key').loc['fabrication', 'Included']

import pytest

from scan_roi.models import TraditionalParams
from scan_roi.scanning import derive_scanning_params


@pytest.fixture
def traditional():
    # Default profile of the calculator: 2 surveyors, 8 projects a month
    return TraditionalParams(
        personnel_count=2,
        hourly_rate=65,
        field_hours=24,
        deliverable_hours=40,
        monthly_project_count=8,
        rework_percent=15,
    )


@pytest.fixture
def scanning(traditional):
    return derive_scanning_params(traditional, 'X9 Core', operator_count=1)


@pytest.fixture
def small_shop():
    # Slow payback: curves cross inside the 36 month horizon
    return TraditionalParams(
        personnel_count=1,
        hourly_rate=50,
        field_hours=12,
        deliverable_hours=8,
        monthly_project_count=4,
        rework_percent=10,
    )

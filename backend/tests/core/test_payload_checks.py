"""Payload Checks — repository-level validation before storage.

Tests:
    - Missing owner / required field -> PayloadValidationError naming the field
    - Range checks on age, salary, latitude, longitude
    - end_date before start_date rejected
"""

from datetime import date
from types import SimpleNamespace

import pytest

from worksite.core.domain_types import ProjectStatus
from worksite.core.errors import PayloadValidationError
from worksite.core.payload_checks import check_project, check_worker


def _worker(**overrides):
    values = dict(user_id=1, name="Ana", position="Mason", age=30, salary=2500)
    values.update(overrides)
    return SimpleNamespace(**values)


def _project(**overrides):
    values = dict(
        user_id=1, name="Bridge", status="active",
        start_date=date(2024, 1, 1), end_date=None,
        latitude=-23.5, longitude=-46.6,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_valid_worker_passes():
    check_worker(_worker())


@pytest.mark.parametrize("overrides,field", [
    ({"user_id": None}, "user_id"),
    ({"name": "  "}, "name"),
    ({"position": None}, "position"),
    ({"age": 17}, "age"),
    ({"age": 101}, "age"),
    ({"age": "30"}, "age"),
    ({"salary": -1}, "salary"),
    ({"salary": 10.5}, "salary"),
])
def test_invalid_worker_names_the_field(overrides, field):
    with pytest.raises(PayloadValidationError) as exc:
        check_worker(_worker(**overrides))
    assert exc.value.field == field


def test_valid_project_passes_with_enum_status():
    check_project(_project(status=ProjectStatus.ON_HOLD))


@pytest.mark.parametrize("overrides,field", [
    ({"status": "paused"}, "status"),
    ({"latitude": 91.0}, "latitude"),
    ({"longitude": -180.5}, "longitude"),
    ({"start_date": None}, "start_date"),
    ({"end_date": date(2023, 12, 31)}, "end_date"),
])
def test_invalid_project_names_the_field(overrides, field):
    with pytest.raises(PayloadValidationError) as exc:
        check_project(_project(**overrides))
    assert exc.value.field == field


def test_end_date_equal_to_start_date_is_allowed():
    check_project(_project(end_date=date(2024, 1, 1)))

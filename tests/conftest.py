"""Shared fixtures."""

import pytest

from snowbird.models import BestDayResult
from tests.mock_data import make_result


@pytest.fixture
def sample_result() -> BestDayResult:
    return make_result()

import logging
import math

import pytest
from pydicom.dataset import Dataset

from transfer.rescale import (
    RescaleParameters,
    SOURCE_IDENTITY,
    SOURCE_METADATA,
    SOURCE_MISSING,
    to_hu,
    to_scalar,
)


@pytest.mark.parametrize("slope, intercept", [
    (1.0, -1024.0),
    (0.5, -1000.0),
    (2.5, 12.0),
    (-1.0, 3.0),
    (1e-3, 0.0),
])
@pytest.mark.parametrize("hu", [-1000.0, -600.0, 0.0, 40.0, 1500.0, 3000.0])
def test_round_trip(slope, intercept, hu):
    params = RescaleParameters(slope, intercept)
    assert math.isclose(to_hu(to_scalar(hu, params), params), hu, rel_tol=1e-9, abs_tol=1e-6)


def test_to_scalar_shift():
    params = RescaleParameters(1.0, -1024.0)
    assert to_scalar(-1024.0, params) == 0.0
    assert to_scalar(40.0, params) == 1064.0
    assert to_hu(0.0, params) == -1024.0


def test_zero_slope_is_treated_as_one(caplog):
    with caplog.at_level(logging.WARNING, logger="transfer.rescale"):
        params = RescaleParameters.from_values(0.0, -1024.0)
    assert params.is_degenerate
    assert params.slope == 0.0
    assert params.effective_slope == 1.0
    assert to_scalar(0.0, params) == 1024.0
    assert "slope" in caplog.text.lower()
    assert "zero slope" in params.describe()


def test_missing_tags_default_to_identity(caplog):
    with caplog.at_level(logging.WARNING, logger="transfer.rescale"):
        params = RescaleParameters.from_values(None, None)
    assert params.slope == 1.0
    assert params.intercept == 0.0
    assert params.source == SOURCE_MISSING
    assert params.is_identity
    assert "Missing rescale metadata" in caplog.text


def test_one_missing_tag_keeps_the_other():
    params = RescaleParameters.from_values(None, -1024)
    assert params.source == SOURCE_MISSING
    assert params.slope == 1.0
    assert params.intercept == -1024.0


def test_from_dataset_reads_tags():
    ds = Dataset()
    ds.RescaleSlope = "1"
    ds.RescaleIntercept = "-1024"
    params = RescaleParameters.from_dataset(ds)
    assert params.source == SOURCE_METADATA
    assert params.slope == 1.0
    assert params.intercept == -1024.0


def test_from_dataset_without_tags():
    params = RescaleParameters.from_dataset(Dataset())
    assert params.source == SOURCE_MISSING
    assert params.is_identity


def test_identity_is_distinguishable_from_missing():
    assert RescaleParameters.identity().source == SOURCE_IDENTITY
    assert RescaleParameters.identity() != RescaleParameters.from_values(None, None)

"""
Tests for Design construction and column selection.
"""

import numpy as np
import pytest

from fluxpredictor.core.datasource import DataSource
from fluxpredictor.core.exceptions import DimensionError, ValidationError
from fluxpredictor.regression.design import Design, INTERCEPT


class TestConstruction:
    """Design building from arrays and DataSources."""

    def test_intercept_prepended(self, rng):
        X = rng.standard_normal((10, 2))
        design = Design.from_arrays(X, rng.standard_normal(10))
        np.testing.assert_array_equal(design.X[:, 0], np.ones(10))
        np.testing.assert_array_equal(design.X[:, 1:], X)
        assert design.p == 3
        assert design.n == 10

    def test_default_names(self, rng):
        design = Design.from_arrays(rng.standard_normal((5, 2)), np.zeros(5))
        assert design.names == ('x1', 'x2')
        assert design.column_names == (INTERCEPT, 'x1', 'x2')

    def test_1d_X_is_one_predictor(self):
        design = Design.from_arrays(np.arange(4.0), np.zeros(4))
        assert design.names == ('x1',)

    def test_column_y_squeezed(self):
        design = Design.from_arrays(np.arange(4.0), np.zeros((4, 1)))
        assert design.y.shape == (4,)

    def test_from_datasource_order(self):
        ds = DataSource.from_arrays(b=[1.0, 2.0, 3.0], a=[4.0, 5.0, 6.0], Flux=[0.0, 1.0, 2.0])
        design = Design.from_datasource(ds, x=['a', 'b'], y='Flux')
        assert design.names == ('a', 'b')
        np.testing.assert_array_equal(design.X[:, 1], [4.0, 5.0, 6.0])

    def test_from_datasource_single_name(self):
        ds = DataSource.from_arrays(a=[1.0, 2.0], Flux=[0.0, 1.0])
        assert Design.from_datasource(ds, x='a', y='Flux').names == ('a',)

    def test_name_count_mismatch(self, rng):
        with pytest.raises(ValueError, match="predictor names"):
            Design.from_arrays(rng.standard_normal((5, 2)), np.zeros(5), names=['a'])

    def test_no_rows(self):
        with pytest.raises(ValidationError, match="at least 1"):
            Design.from_arrays(np.empty((0, 2)), np.empty(0))

    def test_inconsistent_length(self):
        with pytest.raises(DimensionError):
            Design.from_arrays(np.zeros((5, 2)), np.zeros(4))


class TestSelect:
    """Column selection that keeps the intercept."""

    def test_keeps_intercept_and_chosen(self, rng):
        X = rng.standard_normal((8, 3))
        design = Design.from_arrays(X, np.zeros(8), names=['a', 'b', 'c'])
        sub = design.select([0, 2])
        assert sub.names == ('a', 'c')
        assert sub.p == 3
        np.testing.assert_array_equal(sub.X[:, 0], np.ones(8))
        np.testing.assert_array_equal(sub.X[:, 1:], X[:, [0, 2]])
        np.testing.assert_array_equal(sub.y, design.y)

    def test_gram_matrix(self, rng):
        design = Design.from_arrays(rng.standard_normal((8, 2)), rng.standard_normal(8))
        np.testing.assert_allclose(design.XtX(), design.X.T @ design.X)

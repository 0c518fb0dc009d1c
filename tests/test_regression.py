"""Tests for simple OLS regression."""

import numpy as np
import pytest

from tabular_tlbx.analysis.regression import LinearRegressionAnalyzer, RegressionResult
from tabular_tlbx.data import Table, parse_table
from tabular_tlbx.errors import DegenerateInputError, InsufficientDataError


class TestLinearRegressionAnalyzer:
    """Test LinearRegressionAnalyzer functionality."""

    def test_reference_scenario(self) -> None:
        table = Table.from_values(["x", "y"], [[1, 2], [2, 4], [3, 6]])
        res = LinearRegressionAnalyzer(table, "x", "y").fit().result()

        assert isinstance(res, RegressionResult)
        assert res.slope == pytest.approx(2.0)
        assert res.intercept == pytest.approx(0.0)
        assert res.r_squared == pytest.approx(1.0)
        assert res.n_obs == 3

    def test_line_passes_through_means(self) -> None:
        rng = np.random.default_rng(11)
        xs = rng.uniform(0, 10, size=25)
        ys = 3 * xs - 2 + rng.normal(scale=2, size=25)
        table = Table.from_values(["x", "y"], [[float(x), float(y)] for x, y in zip(xs, ys)])

        res = LinearRegressionAnalyzer(table, 1, 2).fit().result()

        assert res.predict(xs.mean()) == pytest.approx(ys.mean())
        slope, intercept = np.polyfit(xs, ys, deg=1)
        assert res.slope == pytest.approx(slope)
        assert res.intercept == pytest.approx(intercept)

    def test_uses_only_complete_pairs(self) -> None:
        table = parse_table("x,y\n1,2\n2,\nfoo,5\n3,6\n4,8")
        res = LinearRegressionAnalyzer(table, "x", "y").fit().result()

        assert res.row_indices == (0, 3, 4)
        assert res.rows.n_rows == 3
        assert res.rows.rows[1] == table.rows[3]

    def test_too_few_rows(self) -> None:
        with pytest.raises(InsufficientDataError, match="found 1"):
            LinearRegressionAnalyzer(parse_table("x,y\n1,2\n,3"), "x", "y").fit()

    def test_constant_x(self) -> None:
        with pytest.raises(DegenerateInputError, match="'x' is constant"):
            LinearRegressionAnalyzer(parse_table("x,y\n1,2\n1,3"), "x", "y").fit()

    def test_constant_y_is_a_flat_line(self) -> None:
        res = LinearRegressionAnalyzer(parse_table("x,y\n1,5\n2,5\n3,5"), "x", "y").fit().result()
        assert (res.slope, res.intercept, res.r_squared) == (0.0, 5.0, 1.0)

    @pytest.mark.parametrize("scale", [1e-160, 1e200])
    def test_extreme_magnitudes(self, scale: float) -> None:
        table = Table.from_values(["x", "y"], [[0, 0], [1 * scale, 1 * scale], [2 * scale, 3 * scale]])
        res = LinearRegressionAnalyzer(table, "x", "y").fit().result()

        # Same data as x = 0, 1, 2 and y = 0, 1, 3 up to a common factor.
        assert res.slope == pytest.approx(1.5)
        assert res.intercept == pytest.approx(-scale / 6, abs=0)
        assert res.r_squared == pytest.approx(81 / 84)

    def test_coefficients_beyond_float_range_raise(self) -> None:
        table = Table.from_values(["x", "y"], [[0, 0], [1e-300, 1e300]])
        with pytest.raises(DegenerateInputError, match="no finite coefficients"):
            LinearRegressionAnalyzer(table, "x", "y").fit()

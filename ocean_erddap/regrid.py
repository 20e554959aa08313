#   Open Ocean marine data processing
#   Copyright (C) 2025 John Kennedy
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU General Public License as published by
#   the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU General Public License for more details.
#
#   You should have received a copy of the GNU General Public License
#   along with this program.  If not, see <https://www.gnu.org/licenses/>.
import numpy as np
import xarray as xr
from loguru import logger
from scipy.interpolate import griddata
from scipy.spatial import QhullError

from ocean_erddap.exceptions import InsufficientDataError
from ocean_erddap.utils import strictly_monotonic

MINIMUM_POINTS = 3


def axis_labels(table, axes, order="C"):
    """Check that a long table is a complete grid laid out in the declared raster order.

    Parameters
    ----------
    table: pandas.DataFrame
        One row per grid cell
    axes: list of str
        Coordinate columns, slowest varying first for order "C", e.g. ["latitude", "longitude"]
    order: str
        "C" if the last axis varies fastest (row-major), "F" if the first axis varies fastest.

    Returns
    -------
    list of np.ndarray
        The labels along each axis in the order they appear.
    """
    if order not in ("C", "F"):
        raise ValueError(f"Unknown raster order {order}")

    shape = [table[axis].nunique() for axis in axes]
    if int(np.prod(shape)) != len(table):
        raise ValueError(f"Table with {len(table)} rows is not a complete {shape} grid")

    labels = []
    for j, axis in enumerate(axes):
        values = np.reshape(table[axis].to_numpy(), shape, order=order)
        values = np.moveaxis(values, j, 0).reshape(shape[j], -1)
        # Every row must repeat the same label, and labels must run one way along the axis
        if not np.all(values == values[:, :1]) or not strictly_monotonic(values[:, 0]):
            raise ValueError(f"Rows are not in {order} raster order along {axis}")
        labels.append(values[:, 0])

    return labels


def regularise_axes(table, axes, order="C"):
    """Relabel coordinate columns of a long table with evenly spaced values.

    Each axis is replaced by an evenly spaced sequence with the same end points and number of
    points. Cell values are not moved or resampled. The raster order is checked first.
    """
    labels = axis_labels(table, axes, order=order)
    shape = [len(label) for label in labels]

    result = table.copy()
    for j, axis in enumerate(axes):
        even = np.linspace(labels[j][0], labels[j][-1], shape[j])
        along = [1] * len(shape)
        along[j] = shape[j]
        result[axis] = np.broadcast_to(np.reshape(even, along), shape).reshape(-1, order=order)
    return result


def regularise_dataset_axis(ds, dim):
    """Replace a nearly even coordinate of an xarray object with an exactly even one."""
    values = ds[dim].values
    if not strictly_monotonic(values):
        raise ValueError(f"Coordinate {dim} is not monotonic")
    even = np.linspace(values[0], values[-1], len(values))
    return ds.assign_coords({dim: (dim, even, ds[dim].attrs)})


def interpolate_scattered(x, y, values, x_target, y_target, method="linear", x_name="x", y_name="y"):
    """Interpolate scattered (x, y, value) points onto a regular grid.

    Points where any of x, y or value is NaN are dropped first.

    Parameters
    ----------
    x, y, values: array-like
        Positions and values of the scattered points
    x_target, y_target: array-like
        Axes of the output grid
    method: str
        "linear", "nearest" or "cubic", passed to scipy.interpolate.griddata

    Returns
    -------
    xarray.DataArray
        Interpolated values on (y_name, x_name). Target points outside the convex hull of the
        data are NaN for linear and cubic interpolation.
    """
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    values = np.asarray(values, dtype=float).ravel()

    valid = ~(np.isnan(x) | np.isnan(y) | np.isnan(values))
    n_valid = int(np.count_nonzero(valid))
    if n_valid < MINIMUM_POINTS:
        raise InsufficientDataError(f"Need at least {MINIMUM_POINTS} valid points to interpolate, got {n_valid}")

    points = np.column_stack([x[valid], y[valid]])
    x_target = np.asarray(x_target, dtype=float)
    y_target = np.asarray(y_target, dtype=float)
    xx, yy = np.meshgrid(x_target, y_target)

    try:
        grid = griddata(points, values[valid], (xx, yy), method=method)
    except QhullError as err:
        raise InsufficientDataError("Points are collinear or coincident, can't interpolate") from err

    logger.debug(f"Interpolated {n_valid} points onto a {grid.shape} grid")
    return xr.DataArray(grid, dims=(y_name, x_name), coords={y_name: y_target, x_name: x_target})


def regrid_dataarray(da, x_dim="longitude", y_dim="latitude", nx=None, ny=None, method="linear"):
    """Interpolate a field with irregular coordinate axes onto an evenly spaced grid.

    By default the new grid has the same number of points along each axis as the input.
    """
    field = da.squeeze(drop=True)
    if set(field.dims) != {x_dim, y_dim}:
        raise ValueError(f"Expected a field on ({y_dim}, {x_dim}), got {field.dims}")
    field = field.transpose(y_dim, x_dim)

    x_values = field[x_dim].values
    y_values = field[y_dim].values
    yy, xx = np.meshgrid(y_values, x_values, indexing="ij")

    nx = nx or len(x_values)
    ny = ny or len(y_values)
    x_target = np.linspace(np.min(x_values), np.max(x_values), nx)
    y_target = np.linspace(np.min(y_values), np.max(y_values), ny)

    out = interpolate_scattered(
        xx, yy, field.values, x_target, y_target, method=method, x_name=x_dim, y_name=y_dim
    )
    out.name = da.name
    out.attrs = dict(da.attrs)
    return out

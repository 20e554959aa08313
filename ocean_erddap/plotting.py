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
import matplotlib.pyplot as plt
import cartopy.crs as ccrs


class PlotStyle:
    """Everything a plot needs to know about colours and layout.

    Passed explicitly to each plotting function so no colour table lives in module state.
    """

    def __init__(self, cmap="viridis", levels=None, vmin=None, vmax=None, coastlines=True,
                 figsize=(16, 9), title="", colorbar_label=None):
        self.cmap = cmap
        self.levels = levels
        self.vmin = vmin
        self.vmax = vmax
        self.coastlines = coastlines
        self.figsize = figsize
        self.title = title
        self.colorbar_label = colorbar_label

    def colour_kwargs(self):
        kwargs = {"cmap": self.cmap}
        if self.levels is not None:
            kwargs["levels"] = self.levels
        else:
            kwargs["vmin"] = self.vmin
            kwargs["vmax"] = self.vmax
        return kwargs


def finish(filename):
    if filename is None:
        plt.show()
    else:
        plt.savefig(filename)
    plt.close('all')


def plot_map(da, style=None, filename=None):
    """Plot a 2-D latitude-longitude field on a PlateCarree map"""
    style = style or PlotStyle()

    plt.figure()
    plt.gcf().set_size_inches(*style.figsize)
    proj = ccrs.PlateCarree()
    cbar_kwargs = {"label": style.colorbar_label} if style.colorbar_label else None
    p = da.plot(
        transform=proj,
        subplot_kws={'projection': proj},
        cbar_kwargs=cbar_kwargs,
        **style.colour_kwargs(),
    )
    if style.coastlines:
        p.axes.coastlines()
    plt.title(style.title)
    finish(filename)


def plot_time_series(table, x, y, style=None, filename=None):
    """Line plot of one or more columns of a table against another"""
    style = style or PlotStyle()
    columns = [y] if isinstance(y, str) else list(y)

    plt.figure()
    plt.gcf().set_size_inches(*style.figsize)
    for column in columns:
        plt.plot(table[x], table[column], label=column)
    plt.axhline(0.0, color="grey", linewidth=0.5)
    plt.xlabel(x)
    if len(columns) > 1:
        plt.legend()
    else:
        plt.ylabel(columns[0])
    plt.title(style.title)
    finish(filename)


def plot_scatter(table, x, y, c=None, style=None, filename=None):
    """Scatter plot of two columns, optionally coloured by a third"""
    style = style or PlotStyle()

    plt.figure()
    plt.gcf().set_size_inches(*style.figsize)
    if c is None:
        plt.scatter(table[x], table[y], s=10)
    else:
        points = plt.scatter(
            table[x], table[y], c=table[c], s=10, cmap=style.cmap, vmin=style.vmin, vmax=style.vmax
        )
        plt.colorbar(points, label=style.colorbar_label or c)
    plt.xlabel(x)
    plt.ylabel(y)
    plt.title(style.title)
    finish(filename)

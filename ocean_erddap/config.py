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
import os
from pathlib import Path

# ERDDAP server used when a call does not name one
ERDDAP_SERVER = os.getenv("ERDDAP_SERVER", "https://coastwatch.pfeg.noaa.gov/erddap").rstrip("/")

# Seconds to wait for the server. There is no retry.
ERDDAP_TIMEOUT = float(os.getenv("ERDDAP_TIMEOUT", "120"))

USER_AGENT = os.getenv("USER_AGENT", "Mozilla/5.0")

# Where the scripts write figures and tables
OUTPUT_DIR = Path(os.getenv("OODIR", "."))

# Dates arrive as seconds since this instant
EPOCH = "1970-01-01T00:00:00Z"

# Degrees C, used to sanity check SST after the missing cells are dropped
PLAUSIBLE_SST_RANGE = (-2.0, 40.0)

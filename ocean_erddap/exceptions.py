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


class ErddapError(Exception):
    pass


class DatasetNotFoundError(ErddapError):
    pass


class InvalidRangeError(ErddapError, ValueError):
    pass


class NetworkError(ErddapError):
    pass


class ServerError(ErddapError):

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(ErddapError, ValueError):
    pass


class InsufficientDataError(ErddapError, ValueError):
    pass

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
import re

import requests
from loguru import logger

from ocean_erddap.config import ERDDAP_TIMEOUT, USER_AGENT
from ocean_erddap.exceptions import NetworkError, ServerError

NO_MATCHING_RESULTS = "no matching results"


def get_response(url):
    """Make a single GET request to an ERDDAP server.

    Any transport failure from requests is raised as NetworkError. The response is returned whatever its status so
    that callers can decide what a 404 means for their endpoint.
    """
    logger.debug(f"GET {url}")
    try:
        r = requests.get(url, headers={'User-agent': USER_AGENT}, timeout=ERDDAP_TIMEOUT)
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"Couldn't connect to {url}") from err
    return r


def erddap_message(text):
    """Pull the message out of an ERDDAP error body, falling back to the raw text."""
    match = re.search(r'message="(.*)"', text or "", flags=re.DOTALL)
    if match:
        return match.group(1).strip()
    return (text or "").strip()


def is_empty_result(r):
    return r.status_code == 404 and NO_MATCHING_RESULTS in (r.text or "").lower()


def raise_for_status(r, url):
    if r.status_code != 200:
        raise ServerError(
            f"ERDDAP request failed with status {r.status_code}: {erddap_message(r.text)} ({url})",
            status_code=r.status_code,
        )


def get_text(url):
    r = get_response(url)
    raise_for_status(r, url)
    return r.text

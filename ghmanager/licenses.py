"""
licenses.py

Responsibility: Fetch official license texts from the SPDX license list
(https://github.com/spdx/license-list-data) and fill in their placeholders.
"""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

SPDX_TEXT_URL = "https://raw.githubusercontent.com/spdx/license-list-data/main/text/{license_id}.txt"


class LicenseError(RuntimeError):
    pass


def fetch_license_text(license_id: str, *, timeout: float = 30) -> str:
    """
    Download the plain-text license for an SPDX identifier (e.g. "MIT", "Apache-2.0").
    """
    url = SPDX_TEXT_URL.format(license_id=license_id)
    logger.debug("Fetching license text: %s", url)
    try:
        r = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise LicenseError(f"Failed fetching license {license_id}: {e}") from e
    if r.status_code >= 400:
        raise LicenseError(f"Failed fetching license {license_id}: HTTP {r.status_code}")
    return r.text


def fill_mit_placeholders(text: str, year: int, holder: str) -> str:
    # Only the first occurrence of each placeholder is part of the copyright line.
    return text.replace("<year>", str(year), 1).replace("<copyright holders>", holder, 1)

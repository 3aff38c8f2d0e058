"""Shared helpers for Debate Tab."""

# Debate Tab
# Copyright (C) 2025  Debate Tab developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import math
from typing import Any, Optional

PACKAGE_LOGGER_NAME = "debatetab"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library code never configures output; applications do.
logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name``.

    Every module in the package calls this once at import time::

        logger = setup_logger(__name__)
    """
    return logging.getLogger(name)


def configure_logging(verbose: bool = False, level: Optional[int] = None) -> None:
    """Attach a stream handler to the package logger.

    Args:
        verbose: Log at DEBUG instead of WARNING
        level: Explicit level, overrides ``verbose``
    """
    if level is None:
        level = logging.DEBUG if verbose else logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)

    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.NullHandler)
        for h in package_logger.handlers
    ):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


def parse_score(value: Any) -> float:
    """Coerce a raw speaker score into a float.

    Numbers and numeric strings are taken as they are. Lists and tuples are
    summed, so per-speaker scores can be passed directly. Anything else
    (missing values, garbage strings, NaN) counts as zero.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (list, tuple)):
        return sum(parse_score(v) for v in value)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number

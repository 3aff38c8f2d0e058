"""Exceptions for use in Debate Tab"""

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


# ========== Base Application Exception ==========


class DebateTabException(Exception):
    """Base exception for all Debate Tab errors.

    All custom exceptions in the package should inherit from this class.
    This enables catching all package-specific errors with a single except clause.
    """

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(DebateTabException, ValueError):
    """Base exception for configuration errors.

    Configuration problems are caller mistakes, so these also behave as
    ``ValueError``.
    """

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when a tabulation configuration is invalid."""

    pass


class InvalidTiebreakerException(ConfigurationException):
    """Raised when a tiebreaker sequence names an unknown criterion."""

    pass


class InvalidBreakCategoryException(ConfigurationException):
    """Raised when a break category cannot be processed."""

    pass


# ========== Pairing Exceptions ==========


class PairingException(DebateTabException):
    """Base exception for pairing-related errors."""

    pass


class InvalidPairingException(PairingException, ValueError):
    """Raised when a pairing configuration is invalid."""

    pass


# ========== Input Exceptions ==========


class TournamentDataException(DebateTabException):
    """Raised when a tournament file cannot be read."""

    pass

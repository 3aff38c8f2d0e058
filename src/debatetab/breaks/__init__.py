"""Break qualification for Debate Tab."""

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

from debatetab.breaks.break_generator import (
    BreakGenerator,
    calculate_all_liveness,
    calculate_liveness,
    generate_all_breaks,
    generate_break,
    institution_ranks,
)

__all__ = [
    "BreakGenerator",
    "calculate_all_liveness",
    "calculate_liveness",
    "generate_all_breaks",
    "generate_break",
    "institution_ranks",
]

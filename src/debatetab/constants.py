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

# Sides
SIDE_AFF = "aff"
SIDE_NEG = "neg"
RESULT_BYE = "bye"  # Winner value for a bye round, credited to the aff slot

# Pairing methods
PAIRING_HIGH_HIGH = "high_high"
PAIRING_HIGH_LOW = "high_low"
PAIRING_RANDOM = "random"
PAIRING_METHODS = (PAIRING_HIGH_HIGH, PAIRING_HIGH_LOW, PAIRING_RANDOM)
DEFAULT_PAIRING_METHOD = PAIRING_HIGH_LOW

# Side allocation
SIDE_METHOD_FIXED = "fixed"
SIDE_METHOD_BALANCE = "balance"
SIDE_METHODS = (SIDE_METHOD_FIXED, SIDE_METHOD_BALANCE)
DEFAULT_SIDE_METHOD = SIDE_METHOD_FIXED

# Pairing quality
QUALITY_BASE = 100.0
QUALITY_INSTITUTION_PENALTY = 50.0
QUALITY_REMATCH_PENALTY = 30.0
QUALITY_RECORD_GAP_PENALTY = 10.0  # Per win of difference
QUALITY_SPEAKS_GAP_PENALTY = 0.1  # Per speaker point of difference

# Flags attached to generated pairings
FLAG_REMATCH = "rematch"
FLAG_SAME_INSTITUTION = "same_institution"
FLAG_SIDES_SWAPPED = "sides_swapped"
FLAG_ELIMINATION = "elimination"

# Tiebreaker keys
TB_WINS = "wins"
TB_LOSSES = "losses"
TB_SPEAKS = "speaks"
TB_RANKS = "ranks"
TB_ADJUSTED_SPEAKS = "adjusted_speaks"
TB_ADJUSTED_RANKS = "adjusted_ranks"
TB_DOUBLE_ADJUSTED_SPEAKS = "double_adjusted_speaks"
TB_DOUBLE_ADJUSTED_RANKS = "double_adjusted_ranks"
TB_OPP_WINS = "opp_wins"
TB_OPP_WIN_PCT = "opp_win_pct"
TB_HEAD_TO_HEAD = "head_to_head"
TB_COIN_FLIP = "coin_flip"

# Default display names for tiebreaks
TIEBREAK_NAMES = {
    TB_WINS: "Wins",
    TB_LOSSES: "Losses",
    TB_SPEAKS: "Speaker Points",
    TB_RANKS: "Speaker Ranks",
    TB_ADJUSTED_SPEAKS: "Adjusted Speaks",
    TB_ADJUSTED_RANKS: "Adjusted Ranks",
    TB_DOUBLE_ADJUSTED_SPEAKS: "Double Adjusted Speaks",
    TB_DOUBLE_ADJUSTED_RANKS: "Double Adjusted Ranks",
    TB_OPP_WINS: "Opponent Wins",
    TB_OPP_WIN_PCT: "Opponent Win %",
    TB_HEAD_TO_HEAD: "Head-to-Head",
    TB_COIN_FLIP: "Coin Flip",
}

# Named tiebreak orders
TIEBREAK_PRESETS = {
    "standard": [
        TB_WINS,
        TB_SPEAKS,
        TB_RANKS,
        TB_ADJUSTED_SPEAKS,
        TB_ADJUSTED_RANKS,
        TB_OPP_WINS,
        TB_HEAD_TO_HEAD,
        TB_COIN_FLIP,
    ],
    "speaks_first": [
        TB_SPEAKS,
        TB_WINS,
        TB_RANKS,
        TB_OPP_WINS,
        TB_HEAD_TO_HEAD,
        TB_COIN_FLIP,
    ],
    "ncfca": [
        TB_WINS,
        TB_SPEAKS,
        TB_RANKS,
        TB_ADJUSTED_SPEAKS,
        TB_ADJUSTED_RANKS,
        TB_OPP_WINS,
        TB_COIN_FLIP,
    ],
    "opponent_weighted": [
        TB_WINS,
        TB_OPP_WIN_PCT,
        TB_SPEAKS,
        TB_HEAD_TO_HEAD,
        TB_COIN_FLIP,
    ],
}

DEFAULT_TIEBREAK_SORT_ORDER = [
    TB_WINS,
    TB_SPEAKS,
    TB_ADJUSTED_SPEAKS,
    TB_OPP_WINS,
    TB_HEAD_TO_HEAD,
    TB_COIN_FLIP,
]

# Adjusted totals drop this many best and worst rounds
DEFAULT_DROP_COUNT = 1
DOUBLE_ADJUSTED_DROP_COUNT = 2

# Speaker awards list this many speakers unless told otherwise
DEFAULT_SPEAKER_AWARDS_TOP_N = 10

# Comparison precision for accumulated float totals
SCORE_PRECISION = 6

# Break rules
BREAK_STANDARD = "standard"
BREAK_AIDA_1996 = "aida-1996"
BREAK_AIDA_2016 = "aida-2016"
AIDA_MAX_INSTITUTION_RANK = 3

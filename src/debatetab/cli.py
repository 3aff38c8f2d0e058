"""Command-line interface for Debate Tab.

Reads a tournament JSON file and prints standings, the next round's draw,
an elimination bracket, the break, liveness or speaker awards. Nothing is
written back.

Tournament file layout::

    {
        "config": {...},          # TabulationConfig.from_dict
        "teams": [{"id": "T1", "name": "...", "speakers": ["...", "..."]}],
        "judges": [{"id": "J1", "name": "...", "institution": "..."}],
        "results": [{"aff_id": "T1", "neg_id": "T2", "winner": "aff", ...}],
        "constraints": {...},     # PairingConstraints.from_dict
        "eligibility": {"novice": {"T1": true}},
        "rooms": ["Room 1", "Room 2"]
    }
"""

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

import argparse
import json
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from debatetab.breaks.break_generator import (
    calculate_all_liveness,
    generate_all_breaks,
)
from debatetab.constants import (
    DEFAULT_SPEAKER_AWARDS_TOP_N,
    PAIRING_METHODS,
    TIEBREAK_PRESETS,
)
from debatetab.exceptions import (
    ConfigurationException,
    DebateTabException,
    TournamentDataException,
)
from debatetab.models.config import TabulationConfig
from debatetab.models.pairing import PairingConstraints, SeedEntry
from debatetab.models.results import PairingResult
from debatetab.models.standings import TeamRecord
from debatetab.models.team import Judge, Team
from debatetab.pairing.elimination import generate_elimination_pairings
from debatetab.pairing.power_pairing import generate_pairings, unpaired_teams
from debatetab.tabulation.speaker_awards import calculate_speaker_awards
from debatetab.tabulation.standings_calculator import compute_standings
from debatetab.tabulation.tiebreak_orderer import (
    order_by_tiebreakers,
    tiebreaker_label,
)
from debatetab.utils import configure_logging, setup_logger

logger = setup_logger(__name__)


@dataclass
class TournamentData:
    """Everything read from a tournament file."""

    config: TabulationConfig
    teams: List[Team]
    judges: List[Judge] = field(default_factory=list)
    results: List[PairingResult] = field(default_factory=list)
    constraints: PairingConstraints = field(default_factory=PairingConstraints)
    eligibility: Dict[str, Dict[str, bool]] = field(default_factory=dict)
    rooms: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentData":
        config = TabulationConfig.from_dict(data.get("config", {}))
        config.validate()

        constraint_data = dict(data.get("constraints", {}))
        constraint_data.setdefault("avoid_rematches", config.avoid_rematches)
        constraint_data.setdefault("club_protect", config.club_protect)

        return cls(
            config=config,
            teams=[Team.from_dict(t) for t in data.get("teams", [])],
            judges=[Judge.from_dict(j) for j in data.get("judges", [])],
            results=[PairingResult.from_dict(r) for r in data.get("results", [])],
            constraints=PairingConstraints.from_dict(constraint_data),
            eligibility={
                category_id: {str(t): bool(v) for t, v in teams.items()}
                for category_id, teams in data.get("eligibility", {}).items()
            },
            rooms=[str(r) for r in data.get("rooms", [])],
        )


def load_tournament_file(path: Path) -> TournamentData:
    """Read and validate a tournament file.

    Raises:
        TournamentDataException: If the file is missing or malformed
        ConfigurationException: If the configuration is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise TournamentDataException(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TournamentDataException(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise TournamentDataException(f"{path} must contain a JSON object")

    try:
        tournament = TournamentData.from_dict(data)
    except ConfigurationException:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TournamentDataException(
            f"Malformed tournament data in {path}: {e}"
        ) from e

    logger.info(
        "Loaded %s: %s teams, %s judges, %s results",
        path,
        len(tournament.teams),
        len(tournament.judges),
        len(tournament.results),
    )
    return tournament


def ranked_standings(
    tournament: TournamentData, rng: Optional[random.Random] = None
) -> List[TeamRecord]:
    """Compute and order standings using the file's configuration."""
    config = tournament.config
    records = compute_standings(
        tournament.teams,
        tournament.results,
        drop_speaks=config.drop_speaks,
        drop_ranks=config.drop_ranks,
        include_elimination=config.include_elimination,
    )
    return order_by_tiebreakers(records, config.tiebreak_order, rng=rng)


# ========== Commands ==========


def _emit_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def cmd_standings(tournament: TournamentData, args: argparse.Namespace) -> int:
    standings = ranked_standings(tournament, _make_rng(args))
    if args.json:
        _emit_json([r.to_dict() for r in standings])
        return 0

    print(f"{'#':>3}  {'Team':<28} {'W':>3} {'L':>3} {'Speaks':>8} {'Opp W':>6}")
    for position, record in enumerate(standings, start=1):
        print(
            f"{position:>3}  {record.team.display_name[:28]:<28} "
            f"{record.wins:>3} {record.losses:>3} "
            f"{record.speaks:>8.1f} {record.opp_strength:>6}"
        )
    labels = ", ".join(tiebreaker_label(n) for n in tournament.config.tiebreak_order)
    print(f"\nTiebreaks: {labels}")
    return 0


def cmd_pair(tournament: TournamentData, args: argparse.Namespace) -> int:
    rng = _make_rng(args)
    standings = ranked_standings(tournament, rng)
    options = tournament.config.pairing_options(rooms=tournament.rooms)
    if args.method:
        options.method = args.method

    pairings = generate_pairings(
        standings,
        tournament.judges,
        tournament.constraints,
        options,
        previous_pairings=tournament.results,
        rng=rng,
    )
    byes = unpaired_teams(standings, pairings)

    if args.json:
        _emit_json(
            {"pairings": [p.to_dict() for p in pairings], "byes": byes}
        )
        return 0

    _print_pairings(pairings)
    if byes:
        print(f"\nByes: {', '.join(byes)}")
    return 0


def cmd_elim(tournament: TournamentData, args: argparse.Namespace) -> int:
    if args.size <= 0:
        print(
            f"error: bracket size must be positive, got {args.size}", file=sys.stderr
        )
        return 2

    standings = ranked_standings(tournament, _make_rng(args))
    seeds = [
        SeedEntry(team_id=r.team_id, seed=position, institution=r.institution)
        for position, r in enumerate(standings[: args.size], start=1)
    ]
    pairings = generate_elimination_pairings(
        seeds, tournament.judges, tournament.constraints, rooms=tournament.rooms
    )

    if args.json:
        _emit_json([p.to_dict() for p in pairings])
        return 0
    _print_pairings(pairings)
    return 0


def cmd_break(tournament: TournamentData, args: argparse.Namespace) -> int:
    categories = tournament.config.break_categories
    if not categories:
        print("No break categories configured", file=sys.stderr)
        return 1

    standings = ranked_standings(tournament, _make_rng(args))
    breaks = generate_all_breaks(
        standings,
        categories,
        tournament.eligibility,
        tiebreakers=tournament.config.tiebreak_order,
    )

    if args.json:
        _emit_json(
            {cid: [r.to_dict() for r in results] for cid, results in breaks.items()}
        )
        return 0

    names = {c.id: c.name for c in categories}
    for category_id, results in breaks.items():
        print(f"== {names[category_id]} ==")
        for result in results:
            if result.is_breaking or result.remark:
                rank = result.break_rank or "-"
                remark = result.remark.value if result.remark else ""
                print(f"{rank:>3}  {result.team_name:<28} {remark}")
        print()
    return 0


def cmd_liveness(tournament: TournamentData, args: argparse.Namespace) -> int:
    standings = ranked_standings(tournament, _make_rng(args))
    liveness = calculate_all_liveness(
        standings, args.break_size, args.rounds_remaining
    )

    if args.json:
        _emit_json({team_id: status.value for team_id, status in liveness.items()})
        return 0
    for record in standings:
        print(f"{record.team.display_name:<28} {liveness[record.team_id].value}")
    return 0


def cmd_speakers(tournament: TournamentData, args: argparse.Namespace) -> int:
    breaks = None
    categories = tournament.config.break_categories
    if args.exclude_breaking and categories:
        breaks = generate_all_breaks(
            ranked_standings(tournament, _make_rng(args)),
            categories,
            tournament.eligibility,
            tiebreakers=tournament.config.tiebreak_order,
        )

    awards = calculate_speaker_awards(
        tournament.teams,
        tournament.results,
        top_n=args.top,
        exclude_breaking=args.exclude_breaking,
        drop_count=args.drop,
        division=args.division,
        breaks=breaks,
        include_elimination=tournament.config.include_elimination,
    )

    if args.json:
        _emit_json(awards.to_dict())
        return 0

    print(f"{'#':>3}  {'Speaker':<24} {'Team':<20} {'Rds':>3} {'Total':>7} {'Avg':>6}")
    for speaker in awards.top_speakers:
        print(
            f"{speaker.rank:>3}  {speaker.speaker_name[:24]:<24} "
            f"{speaker.team_name[:20]:<20} {speaker.rounds_spoken:>3} "
            f"{speaker.total_points:>7.1f} {speaker.average_points:>6.2f}"
        )
    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    for name, order in TIEBREAK_PRESETS.items():
        print(f"{name}: {', '.join(order)}")
    return 0


def _print_pairings(pairings: Sequence) -> None:
    for pairing in pairings:
        room = f"[{pairing.room}] " if pairing.room else ""
        judge = pairing.judge_id or "no judge"
        flags = f" ({', '.join(pairing.flags)})" if pairing.flags else ""
        print(f"{room}{pairing.aff_id} vs {pairing.neg_id} - {judge}{flags}")


def _make_rng(args: argparse.Namespace) -> random.Random:
    return random.Random(args.seed) if args.seed is not None else random.Random()


# ========== Parser ==========


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="debatetab",
        description="Debate tournament tabulation: standings, draws and breaks",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_file_command(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("tournament", type=Path, help="Tournament JSON file")
        sub.add_argument("--json", action="store_true", help="Print JSON output")
        sub.add_argument(
            "--seed", type=int, help="Seed for coin flips and random pairing"
        )
        return sub

    add_file_command("standings", "Show ranked standings")

    pair = add_file_command("pair", "Draw the next preliminary round")
    pair.add_argument(
        "--method", choices=PAIRING_METHODS, help="Override the pairing method"
    )

    elim = add_file_command("elim", "Draw an elimination bracket from the standings")
    elim.add_argument("--size", type=int, required=True, help="Teams in the bracket")

    add_file_command("break", "Break every configured category")

    liveness = add_file_command("liveness", "Show which teams can still break")
    liveness.add_argument("--break-size", type=int, required=True)
    liveness.add_argument("--rounds-remaining", type=int, required=True)

    speakers = add_file_command("speakers", "Rank individual speakers")
    speakers.add_argument(
        "--top",
        type=int,
        default=DEFAULT_SPEAKER_AWARDS_TOP_N,
        help="Speakers to list",
    )
    speakers.add_argument(
        "--drop", type=int, default=0, help="Best and worst scores to drop"
    )
    speakers.add_argument(
        "--exclude-breaking",
        action="store_true",
        help="Leave out speakers from breaking teams",
    )
    speakers.add_argument("--division", help="Only rank this division")

    subparsers.add_parser("presets", help="List tiebreak presets")

    return parser


COMMANDS = {
    "standings": cmd_standings,
    "pair": cmd_pair,
    "elim": cmd_elim,
    "break": cmd_break,
    "liveness": cmd_liveness,
    "speakers": cmd_speakers,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        if args.command == "presets":
            return cmd_presets(args)
        tournament = load_tournament_file(args.tournament)
        return COMMANDS[args.command](tournament, args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except DebateTabException as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

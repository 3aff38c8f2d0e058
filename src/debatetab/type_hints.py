"""Type hints used in Debate Tab."""

from typing import Dict, Sequence

TeamId = str
CategoryId = str

# Ordered tiebreak criteria names
TiebreakerSequence = Sequence[str]
# team id -> explicitly eligible / ineligible
EligibilityMap = Dict[TeamId, bool]
# team id -> id of the category the team breaks in
AssignmentMap = Dict[TeamId, CategoryId]

#  LocalWords:  tiebreak

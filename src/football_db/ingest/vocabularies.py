"""Reference data for the controlled vocabularies, positions and competition stages.

Codes observed in event files but missing here are added by the events
loader's reconciliation step, so this list only needs to be a good start.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Sequence, Tuple

from football_db.ingest.rows import TableRow
from football_db.ingest.writer import BatchedWriter

logger = logging.getLogger(__name__)

Vocabulary = Sequence[Tuple[int, str]]

VOCABULARIES: Mapping[str, Vocabulary] = {
    "event_types": (
        (2, "Ball Recovery"),
        (3, "Dispossessed"),
        (4, "Duel"),
        (5, "Camera On"),
        (6, "Block"),
        (8, "Offside"),
        (9, "Clearance"),
        (10, "Interception"),
        (14, "Dribble"),
        (16, "Shot"),
        (17, "Pressure"),
        (18, "Half Start"),
        (19, "Substitution"),
        (20, "Own Goal Against"),
        (21, "Foul Won"),
        (22, "Foul Committed"),
        (23, "Goal Keeper"),
        (24, "Bad Behaviour"),
        (25, "Own Goal For"),
        (26, "Player On"),
        (27, "Player Off"),
        (28, "Shield"),
        (29, "Camera off"),
        (30, "Pass"),
        (33, "50/50"),
        (34, "Half End"),
        (35, "Starting XI"),
        (36, "Tactical Shift"),
        (37, "Error"),
        (38, "Miscontrol"),
        (39, "Dribbled Past"),
        (40, "Injury Stoppage"),
        (41, "Referee Ball-Drop"),
        (42, "Ball Receipt*"),
        (43, "Carry"),
    ),
    "play_patterns": (
        (1, "Regular Play"),
        (2, "From Corner"),
        (3, "From Free Kick"),
        (4, "From Throw In"),
        (5, "Other"),
        (6, "From Counter"),
        (7, "From Goal Kick"),
        (8, "From Keeper"),
        (9, "From Kick Off"),
    ),
    "body_parts": (
        (35, "Both Hands"),
        (36, "Chest"),
        (37, "Head"),
        (38, "Left Foot"),
        (39, "Left Hand"),
        (40, "Right Foot"),
        (41, "Right Hand"),
        (68, "Drop Kick"),
        (69, "Keeper Arm"),
        (70, "Other"),
        (106, "No Touch"),
    ),
    "pass_heights": ((1, "Ground Pass"), (2, "Low Pass"), (3, "High Pass")),
    "pass_types": (
        (61, "Corner"),
        (62, "Free Kick"),
        (63, "Goal Kick"),
        (64, "Interception"),
        (65, "Kick Off"),
        (66, "Recovery"),
        (67, "Throw-in"),
    ),
    "pass_techniques": (
        (104, "Inswinging"),
        (105, "Outswinging"),
        (107, "Straight"),
        (108, "Through Ball"),
    ),
    "pass_outcomes": (
        (9, "Incomplete"),
        (74, "Injury Clearance"),
        (75, "Out"),
        (76, "Pass Offside"),
        (77, "Unknown"),
    ),
    "shot_outcomes": (
        (96, "Blocked"),
        (97, "Goal"),
        (98, "Off T"),
        (99, "Post"),
        (100, "Saved"),
        (101, "Wayward"),
        (115, "Saved Off Target"),
        (116, "Saved to Post"),
    ),
    "shot_types": (
        (61, "Corner"),
        (62, "Free Kick"),
        (65, "Kick Off"),
        (87, "Open Play"),
        (88, "Penalty"),
    ),
    "shot_techniques": (
        (89, "Backheel"),
        (90, "Diving Header"),
        (91, "Half Volley"),
        (92, "Lob"),
        (93, "Normal"),
        (94, "Overhead Kick"),
        (95, "Volley"),
    ),
    "duel_types": ((10, "Aerial Lost"), (11, "Tackle")),
    "duel_outcomes": (
        (1, "Lost"),
        (4, "Won"),
        (13, "Lost In Play"),
        (14, "Lost Out"),
        (15, "Success"),
        (16, "Success In Play"),
        (17, "Success Out"),
    ),
    "goalkeeper_positions": ((42, "Moving"), (43, "Prone"), (44, "Set")),
    "goalkeeper_techniques": ((45, "Diving"), (46, "Standing")),
    "goalkeeper_types": (
        (25, "Collected"),
        (26, "Goal Conceded"),
        (27, "Keeper Sweeper"),
        (28, "Penalty Conceded"),
        (29, "Penalty Saved"),
        (30, "Punch"),
        (31, "Save"),
        (32, "Shot Faced"),
        (33, "Shot Saved"),
        (34, "Smother"),
        (109, "Penalty Saved to Post"),
        (110, "Saved to Post"),
        (113, "Shot Saved Off Target"),
        (114, "Shot Saved to Post"),
    ),
    "goalkeeper_outcomes": (
        (1, "Lost"),
        (4, "Won"),
        (13, "Lost In Play"),
        (14, "Lost Out"),
        (15, "Success"),
        (16, "Success In Play"),
        (17, "Success Out"),
        (47, "Claim"),
        (48, "Clear"),
        (49, "Collected Twice"),
        (50, "Fail"),
        (52, "In Play Danger"),
        (53, "In Play Safe"),
        (55, "No Touch"),
        (56, "Saved Twice"),
        (58, "Touched In"),
        (59, "Touched Out"),
        (117, "Punched out"),
    ),
    "dribble_outcomes": ((8, "Complete"), (9, "Incomplete")),
    "interception_outcomes": (
        (1, "Lost"),
        (4, "Won"),
        (13, "Lost In Play"),
        (14, "Lost Out"),
        (15, "Success"),
        (16, "Success In Play"),
        (17, "Success Out"),
    ),
    "ball_receipt_outcomes": ((9, "Incomplete"),),
    "fifty_fifty_outcomes": (
        (1, "Lost"),
        (2, "Success To Opposition"),
        (3, "Success To Team"),
        (4, "Won"),
    ),
    "foul_types": (
        (19, "6 Seconds"),
        (20, "Backpass Pick"),
        (21, "Dangerous Play"),
        (22, "Dive"),
        (23, "Foul Out"),
        (24, "Handball"),
    ),
    "card_types": (
        (5, "Yellow Card"),
        (6, "Second Yellow"),
        (7, "Red Card"),
        (65, "Yellow Card"),
        (66, "Second Yellow"),
        (67, "Red Card"),
    ),
}

# (id, name, category, display order)
POSITIONS: Sequence[Tuple[int, str, str, int]] = (
    (1, "Goalkeeper", "Goalkeeper", 1),
    (2, "Right Back", "Defender", 2),
    (3, "Right Center Back", "Defender", 3),
    (4, "Center Back", "Defender", 4),
    (5, "Left Center Back", "Defender", 5),
    (6, "Left Back", "Defender", 6),
    (7, "Right Wing Back", "Defender", 7),
    (8, "Left Wing Back", "Defender", 8),
    (9, "Right Defensive Midfield", "Midfielder", 9),
    (10, "Center Defensive Midfield", "Midfielder", 10),
    (11, "Left Defensive Midfield", "Midfielder", 11),
    (12, "Right Midfield", "Midfielder", 12),
    (13, "Right Center Midfield", "Midfielder", 13),
    (14, "Center Midfield", "Midfielder", 14),
    (15, "Left Center Midfield", "Midfielder", 15),
    (16, "Left Midfield", "Midfielder", 16),
    (17, "Right Wing", "Forward", 17),
    (18, "Right Attacking Midfield", "Midfielder", 18),
    (19, "Center Attacking Midfield", "Midfielder", 19),
    (20, "Left Attacking Midfield", "Midfielder", 20),
    (21, "Left Wing", "Forward", 21),
    (22, "Right Center Forward", "Forward", 22),
    (23, "Center Forward", "Forward", 23),
    (24, "Left Center Forward", "Forward", 24),
    (25, "Secondary Striker", "Forward", 25),
)

COMPETITION_STAGES: Vocabulary = (
    (1, "Regular Season"),
    (10, "Group Stage"),
    (11, "Quarter-finals"),
    (15, "Semi-finals"),
    (25, "3rd Place Final"),
    (26, "Final"),
    (33, "Round of 16"),
    (34, "1st Round"),
    (42, "Apertura"),
    (74, "Championship - Final"),
    (99, "1st Group Stage"),
    (158, "Play-offs - Semi-Finals"),
)


def seed_rows() -> list[TableRow]:
    rows = [
        TableRow(table, {"id": code, "name": name})
        for table, entries in VOCABULARIES.items()
        for code, name in entries
    ]
    rows.extend(
        TableRow(
            "positions",
            {"id": code, "name": name, "category": category, "display_order": order},
        )
        for code, name, category, order in POSITIONS
    )
    rows.extend(
        TableRow("competition_stages", {"id": code, "name": name})
        for code, name in COMPETITION_STAGES
    )
    return rows


def seed_vocabularies(writer: BatchedWriter) -> Dict[str, int]:
    """Insert every reference row; rows already present are left untouched."""

    rows = seed_rows()
    writer.add_all(rows)
    writer.flush()

    offered: Dict[str, int] = {}
    for row in rows:
        offered[row.table] = offered.get(row.table, 0) + 1
    logger.info("Seeded %d reference rows across %d tables", len(rows), len(offered))
    return offered


__all__ = ["VOCABULARIES", "POSITIONS", "COMPETITION_STAGES", "seed_rows", "seed_vocabularies"]

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from football_db.ingest.geometry import Point, distance, point_in_polygon, shoelace_area
from football_db.ingest.rows import TableRow
from football_db.ingest.value_extractors import bool_to_int, extract_location, flag, get_str, to_json


def _point(value: Any) -> Optional[Point]:
    x, y = extract_location(value)
    if x is None or y is None:
        return None
    return x, y


def extract_frame_rows(frame: Mapping[str, Any], *, match_id: int) -> List[TableRow]:
    """A frame row plus one row per freeze-frame player for a 360 tracking record."""

    event_uuid = get_str(frame.get("event_uuid"))
    if not event_uuid:
        return []

    visible_area = frame.get("visible_area")
    players = frame.get("freeze_frame")
    players = [player for player in players if isinstance(player, Mapping)] if isinstance(players, list) else []

    actor = next((player for player in players if player.get("actor") is True), None)
    actor_location = _point(actor.get("location")) if actor is not None else None

    rows = [
        TableRow(
            "three_sixty_frames",
            {
                "event_uuid": event_uuid,
                "match_id": match_id,
                "visible_area": to_json(visible_area) if visible_area is not None else None,
                "player_count": len(players),
                "visible_area_size": shoelace_area(visible_area),
                "raw_json": to_json(frame),
            },
        )
    ]

    for index, player in enumerate(players):
        location = _point(player.get("location"))
        x, y = location if location is not None else (None, None)
        rows.append(
            TableRow(
                "three_sixty_players",
                {
                    "event_uuid": event_uuid,
                    "player_index": index,
                    "teammate": flag(player.get("teammate")),
                    "actor": flag(player.get("actor")),
                    "keeper": flag(player.get("keeper")),
                    "location_x": x,
                    "location_y": y,
                    "distance_to_actor": distance(location, actor_location),
                    "in_visible_area": bool_to_int(point_in_polygon(location, visible_area)),
                },
            )
        )
    return rows


__all__ = ["extract_frame_rows"]

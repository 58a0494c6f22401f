"""Event rows and their type-specific subtype rows.

Each StatsBomb event carries a numeric ``type.id``. :data:`SUBTYPES` maps the
codes that have a dedicated table to the nested object holding their details
(``pass`` for 30, ``shot`` for 16, ...). An event yields at most one subtype
row, and only when its nested object is present; codes without an entry only
produce the core ``events`` row.
"""

from __future__ import annotations

from typing import Any, Callable, Collection, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

from football_db.ingest.extractors import Resolve
from football_db.ingest.rows import TableRow
from football_db.ingest.value_extractors import (
    extract_end_location,
    extract_location,
    flag,
    get_float,
    get_int,
    get_nested_int,
    get_nested_str,
    get_str,
    to_json,
)

# (dimension table, key, name) triples discovered while pre-scanning.
DimensionRef = Tuple[str, int, Optional[str]]


class Reference(NamedTuple):
    payload_key: str
    column: str
    table: str


class Subtype(NamedTuple):
    table: str
    payload_key: Optional[str]
    references: Tuple[Reference, ...] = ()
    flags: Tuple[Tuple[str, str], ...] = ()
    extra: Optional[Callable[[Mapping[str, Any], Mapping[str, Any]], Dict[str, Any]]] = None


def _counterpress(payload: Mapping[str, Any], event: Mapping[str, Any]) -> Dict[str, Any]:
    return {"counterpress": flag(payload.get("counterpress") or event.get("counterpress"))}


def _end_xy(payload: Mapping[str, Any], _: Mapping[str, Any]) -> Dict[str, Any]:
    end_x, end_y = extract_location(payload.get("end_location"))
    return {"end_x": end_x, "end_y": end_y}


def _pass_extra(payload: Mapping[str, Any], event: Mapping[str, Any]) -> Dict[str, Any]:
    values = _end_xy(payload, event)
    values.update(
        length=get_float(payload.get("length")),
        angle=get_float(payload.get("angle")),
        assisted_shot_id=get_str(payload.get("assisted_shot_id")),
    )
    return values


def _shot_extra(payload: Mapping[str, Any], _: Mapping[str, Any]) -> Dict[str, Any]:
    end_x, end_y, end_z = extract_end_location(payload.get("end_location"))
    freeze_frame = payload.get("freeze_frame")
    return {
        "statsbomb_xg": get_float(payload.get("statsbomb_xg")),
        "end_x": end_x,
        "end_y": end_y,
        "end_z": end_z,
        "key_pass_id": get_str(payload.get("key_pass_id")),
        "freeze_frame": to_json(freeze_frame) if freeze_frame is not None else None,
    }


def _foul(committed: bool) -> Callable[[Mapping[str, Any], Mapping[str, Any]], Dict[str, Any]]:
    def extra(payload: Mapping[str, Any], event: Mapping[str, Any]) -> Dict[str, Any]:
        values = _counterpress(payload, event)
        values["committed"] = int(committed)
        return values

    return extra


_BODY_PART = Reference("body_part", "body_part_id", "body_parts")

# Foul Won and Foul Committed share one table; both write every flag column.
_FOUL_FLAGS = tuple((name, name) for name in ("penalty", "advantage", "offensive", "defensive"))


def _outcome(table: str) -> Reference:
    return Reference("outcome", "outcome_id", table)


SUBTYPES: Mapping[int, Subtype] = {
    30: Subtype(
        "passes",
        "pass",
        references=(
            Reference("recipient", "recipient_id", "players"),
            Reference("height", "height_id", "pass_heights"),
            Reference("type", "type_id", "pass_types"),
            _BODY_PART,
            Reference("technique", "technique_id", "pass_techniques"),
            _outcome("pass_outcomes"),
        ),
        flags=(
            ("shot_assist", "shot_assist"),
            ("goal_assist", "goal_assist"),
            ("switch", "is_switch"),
            ("cross", "is_cross"),
            ("cut_back", "cut_back"),
            ("deflected", "deflected"),
            ("miscommunication", "miscommunication"),
            ("aerial_won", "aerial_won"),
            ("no_touch", "no_touch"),
            ("backheel", "backheel"),
            ("through_ball", "through_ball"),
            ("inswinging", "inswinging"),
            ("outswinging", "outswinging"),
            ("straight", "straight"),
        ),
        extra=_pass_extra,
    ),
    16: Subtype(
        "shots",
        "shot",
        references=(
            _outcome("shot_outcomes"),
            Reference("type", "type_id", "shot_types"),
            _BODY_PART,
            Reference("technique", "technique_id", "shot_techniques"),
        ),
        flags=tuple(
            (name, name)
            for name in (
                "first_time",
                "one_on_one",
                "aerial_won",
                "deflected",
                "open_goal",
                "follows_dribble",
                "redirect",
                "saved_off_target",
                "saved_to_post",
            )
        ),
        extra=_shot_extra,
    ),
    43: Subtype("carries", "carry", extra=_end_xy),
    14: Subtype(
        "dribbles",
        "dribble",
        references=(_outcome("dribble_outcomes"),),
        flags=(("overrun", "overrun"), ("nutmeg", "nutmeg"), ("no_touch", "no_touch")),
    ),
    # Pressure events have no nested object.
    17: Subtype("pressures", None, extra=_counterpress),
    4: Subtype(
        "duels",
        "duel",
        references=(Reference("type", "type_id", "duel_types"), _outcome("duel_outcomes")),
        extra=_counterpress,
    ),
    6: Subtype(
        "blocks",
        "block",
        flags=(("deflection", "deflection"), ("offensive", "offensive"), ("save_block", "save_block")),
        extra=_counterpress,
    ),
    10: Subtype(
        "interceptions",
        "interception",
        references=(_outcome("interception_outcomes"),),
        extra=_counterpress,
    ),
    9: Subtype(
        "clearances",
        "clearance",
        references=(_BODY_PART,),
        flags=(("aerial_won", "aerial_won"),),
    ),
    42: Subtype("ball_receipts", "ball_receipt", references=(_outcome("ball_receipt_outcomes"),)),
    2: Subtype(
        "ball_recoveries",
        "ball_recovery",
        flags=(("recovery_failure", "recovery_failure"), ("offensive", "offensive")),
    ),
    33: Subtype(
        "fifty_fifties",
        "50_50",
        references=(_outcome("fifty_fifty_outcomes"),),
        extra=_counterpress,
    ),
    21: Subtype(
        "fouls",
        "foul_won",
        flags=_FOUL_FLAGS,
        extra=_foul(committed=False),
    ),
    22: Subtype(
        "fouls",
        "foul_committed",
        references=(
            Reference("type", "type_id", "foul_types"),
            Reference("card", "card_id", "card_types"),
        ),
        flags=_FOUL_FLAGS,
        extra=_foul(committed=True),
    ),
    24: Subtype("bad_behaviours", "bad_behaviour", references=(Reference("card", "card_id", "card_types"),)),
    23: Subtype(
        "goalkeeper_events",
        "goalkeeper",
        references=(
            Reference("position", "position_id", "goalkeeper_positions"),
            Reference("technique", "technique_id", "goalkeeper_techniques"),
            _BODY_PART,
            Reference("type", "type_id", "goalkeeper_types"),
            _outcome("goalkeeper_outcomes"),
        ),
        extra=_end_xy,
    ),
}

# Core event columns backed by a dimension: (payload key, column, table).
_EVENT_REFERENCES = (
    Reference("type", "type_id", "event_types"),
    Reference("possession_team", "possession_team_id", "teams"),
    Reference("play_pattern", "play_pattern_id", "play_patterns"),
    Reference("team", "team_id", "teams"),
    Reference("player", "player_id", "players"),
    Reference("position", "position_id", "positions"),
)


def event_type_id(event: Mapping[str, Any]) -> Optional[int]:
    return get_nested_int(event, ("type", "id"))


def subtype_for(event: Mapping[str, Any]) -> Optional[Subtype]:
    type_id = event_type_id(event)
    return SUBTYPES.get(type_id) if type_id is not None else None


def _subtype_payload(event: Mapping[str, Any], subtype: Subtype) -> Optional[Mapping[str, Any]]:
    if subtype.payload_key is None:
        return {}
    payload = event.get(subtype.payload_key)
    return payload if isinstance(payload, Mapping) else None


def dimension_refs(event: Mapping[str, Any]) -> Iterator[DimensionRef]:
    """Every ``(table, id, name)`` an event's rows will reference."""

    for reference in _EVENT_REFERENCES:
        yield from _ref(event, reference)

    subtype = subtype_for(event)
    if subtype is None:
        return
    payload = _subtype_payload(event, subtype)
    if payload is None:
        return
    for reference in subtype.references:
        yield from _ref(payload, reference)


def _ref(data: Mapping[str, Any], reference: Reference) -> Iterator[DimensionRef]:
    code = get_nested_int(data, (reference.payload_key, "id"))
    if code is not None:
        yield reference.table, code, get_nested_str(data, (reference.payload_key, "name"))


def extract_event_rows(event: Mapping[str, Any], *, match_id: int, resolve: Resolve) -> List[TableRow]:
    """The core ``events`` row followed by the event's subtype row, if any.

    ``match_id`` comes from the file name; events never carry it themselves.
    """

    event_id = get_str(event.get("id"))
    if not event_id or event_type_id(event) is None:
        return []

    location_x, location_y = extract_location(event.get("location"))
    values: Dict[str, Any] = {
        "id": event_id,
        "event_index": get_int(event.get("index")),
        "match_id": match_id,
        "period": get_int(event.get("period")),
        "timestamp": get_str(event.get("timestamp")),
        "minute": get_int(event.get("minute")),
        "second": get_int(event.get("second")),
        "possession": get_int(event.get("possession")),
        "location_x": location_x,
        "location_y": location_y,
        "duration": get_float(event.get("duration")),
        "under_pressure": flag(event.get("under_pressure")),
        "off_camera": flag(event.get("off_camera")),
        "out": flag(event.get("out")),
        "counterpress": flag(event.get("counterpress")),
        "raw_json": to_json(event),
    }
    for reference in _EVENT_REFERENCES:
        values[reference.column] = resolve(
            reference.table, get_nested_int(event, (reference.payload_key, "id"))
        )

    rows = [TableRow("events", values)]
    subtype_row = _extract_subtype_row(event, event_id, resolve)
    if subtype_row is not None:
        rows.append(subtype_row)
    return rows


def _extract_subtype_row(event: Mapping[str, Any], event_id: str, resolve: Resolve) -> Optional[TableRow]:
    subtype = subtype_for(event)
    if subtype is None:
        return None
    payload = _subtype_payload(event, subtype)
    if payload is None:
        return None

    values: Dict[str, Any] = {"event_id": event_id}
    for reference in subtype.references:
        values[reference.column] = resolve(
            reference.table, get_nested_int(payload, (reference.payload_key, "id"))
        )
    for payload_key, column in subtype.flags:
        values[column] = flag(payload.get(payload_key))
    if subtype.extra is not None:
        values.update(subtype.extra(payload, event))
    return TableRow(subtype.table, values)


def extract_relationship_rows(event: Mapping[str, Any], known_ids: Collection[str]) -> List[TableRow]:
    """Directed ``related_events`` links whose target is an event of the same file."""

    event_id = get_str(event.get("id"))
    related = event.get("related_events")
    if not event_id or not isinstance(related, list):
        return []

    rows: List[TableRow] = []
    seen = set()
    for related_id in related:
        related_id = get_str(related_id)
        if not related_id or related_id in seen or related_id not in known_ids:
            continue
        seen.add(related_id)
        rows.append(TableRow("event_relationships", {"event_id": event_id, "related_event_id": related_id}))
    return rows


__all__ = [
    "SUBTYPES",
    "Subtype",
    "Reference",
    "DimensionRef",
    "event_type_id",
    "subtype_for",
    "dimension_refs",
    "extract_event_rows",
    "extract_relationship_rows",
]

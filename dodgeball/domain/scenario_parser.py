"""Turn uploaded text or JSON documents into scenario requests.

Text documents are whitespace separated tokens. A single case is

    N  x1 y1 ... xN yN  DIRECTION  START

where START is 1-based. A multi-case document starts with the number of
cases T followed by T single cases. JSON documents are either one scenario
object or an array of them.
"""

import json
import logging
import re
from typing import Callable, List, Sequence

from dodgeball.domain import direction
from dodgeball.errors import (
    BadCoordinateError,
    BadCountError,
    BadDirectionError,
    BadStartIndexError,
    MissingFieldError,
    ParseError,
    UnexpectedEndError,
    UnknownDirection,
)
from dodgeball.models.dc_models import PlayerModel, ScenarioRequestModel

DIRECTION_ALIASES = ("startingDirection", "direction", "dir", "startDirection")
START_ALIASES = ("startingPlayer", "start", "s", "startIndex")

# Coordinates travel as int64 on the wire.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


class _TokenCursor:
    def __init__(self, tokens: Sequence[str]):
        self.tokens = tokens
        self.position = 0

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def next(self, what: str) -> str:
        if self.at_end():
            raise UnexpectedEndError(
                f"Unexpected end of input while reading {what} (token {self.position})",
                position=self.position,
            )
        token = self.tokens[self.position]
        self.position += 1
        return token

    def next_int(self, what: str, error_class=ParseError) -> int:
        token = self.next(what)
        if not _INTEGER.fullmatch(token):
            raise error_class(
                f"Expected an integer for {what} but got {token!r} (token {self.position - 1})",
                token=token,
                position=self.position - 1,
            )
        try:
            return int(token)
        except ValueError as e:
            # Python refuses to convert integer strings above its digit limit.
            raise error_class(
                f"Integer for {what} is too long: {_abbreviate(token)} (token {self.position - 1})",
                token=token,
                position=self.position - 1,
            ) from e


def _abbreviate(token: str, limit: int = 20) -> str:
    if len(token) <= limit:
        return repr(token)
    return f"{token[:limit]!r}... ({len(token)} characters)"


def _to_zero_based(start: int, player_count: int, **context) -> int:
    """Convert a 1-based starting player to a 0-based index and check its range."""
    if not 1 <= start <= player_count:
        raise BadStartIndexError(
            f"Starting player {start} is out of range 1..{player_count}",
            token=start,
            **context,
        )
    return start - 1


def _read_case(cursor: _TokenCursor) -> ScenarioRequestModel:
    count_position = cursor.position
    player_count = cursor.next_int("player count", BadCountError)
    if player_count < 1:
        raise BadCountError(
            f"Player count must be positive, got {player_count} (token {count_position})",
            token=str(player_count),
            position=count_position,
        )

    players: List[PlayerModel] = []
    for i in range(player_count):
        coordinates = []
        for axis in ("x", "y"):
            value = cursor.next_int(f"{axis} of player {i + 1}", BadCoordinateError)
            if not INT64_MIN <= value <= INT64_MAX:
                raise BadCoordinateError(
                    f"{axis} of player {i + 1} does not fit in 64 bits (token {cursor.position - 1})",
                    token=str(value),
                    position=cursor.position - 1,
                )
            coordinates.append(value)
        players.append(PlayerModel(x=coordinates[0], y=coordinates[1]))

    direction_token = cursor.next("direction")
    start_direction = direction.encode(direction_token, cursor.position - 1)

    start_position = cursor.position
    start = cursor.next_int("starting player", BadStartIndexError)
    start_index = _to_zero_based(start, player_count, position=start_position)

    return ScenarioRequestModel(
        players=tuple(players),
        start_direction=start_direction,
        start_index=start_index,
    )


def _parse_multi_case(tokens: Sequence[str], first_only: bool) -> List[ScenarioRequestModel]:
    cursor = _TokenCursor(tokens)
    case_count = cursor.next_int("case count", BadCountError)
    if case_count < 0:
        raise BadCountError(
            f"Case count must not be negative, got {case_count}",
            token=tokens[0],
            position=0,
        )

    cases = []
    for _ in range(case_count):
        cases.append(_read_case(cursor))
        if first_only:
            return cases

    if not cursor.at_end():
        raise ParseError(
            f"Unexpected token {cursor.tokens[cursor.position]!r} after {case_count} cases "
            f"(token {cursor.position})",
            token=cursor.tokens[cursor.position],
            position=cursor.position,
        )
    return cases


def _parse_single_case(tokens: Sequence[str], first_only: bool) -> List[ScenarioRequestModel]:
    cursor = _TokenCursor(tokens)
    case = _read_case(cursor)
    if not cursor.at_end():
        raise ParseError(
            f"Unexpected token {cursor.tokens[cursor.position]!r} after the case "
            f"(token {cursor.position})",
            token=cursor.tokens[cursor.position],
            position=cursor.position,
        )
    return [case]


# Tried in order; the first strategy that does not raise wins.
TEXT_STRATEGIES: Sequence[Callable[[Sequence[str], bool], List[ScenarioRequestModel]]] = (
    _parse_multi_case,
    _parse_single_case,
)


def parse_text(text: str, *, first_only: bool = False) -> List[ScenarioRequestModel]:
    """Parse a whitespace separated document

    A leading case count is tried first. If that reading fails for any reason
    the whole document is parsed again from its first token as one case.

    Args:
        text (str): The document
        first_only (bool, optional): Keep only the first case. Defaults to False.

    Raises:
        ParseError: If the last strategy fails too

    Returns:
        List[ScenarioRequestModel]: The cases in document order
    """
    tokens = text.split()
    error = None
    for strategy in TEXT_STRATEGIES:
        try:
            return strategy(tokens, first_only)
        except ParseError as e:
            logging.debug(f"{strategy.__name__} rejected the document: {e}")
            error = e
    raise error


def _first_present(scenario: dict, aliases: Sequence[str], case_index: int):
    for alias in aliases:
        if alias in scenario:
            return alias, scenario[alias]
    raise MissingFieldError(
        f"Case {case_index}: missing field, expected one of {', '.join(aliases)}",
        field=aliases[0],
        index=case_index,
    )


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _json_players(scenario: dict, case_index: int) -> List[PlayerModel]:
    if "players" not in scenario:
        raise MissingFieldError(
            f"Case {case_index}: missing field 'players'", field="players", index=case_index
        )
    entries = scenario["players"]
    if not isinstance(entries, list):
        raise ParseError(
            f"Case {case_index}: 'players' must be an array", field="players", index=case_index
        )
    if not entries:
        raise BadCountError(
            f"Case {case_index}: 'players' must not be empty", field="players", index=case_index
        )

    players = []
    for i, entry in enumerate(entries):
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            or not all(_is_integer(value) and INT64_MIN <= value <= INT64_MAX for value in entry)
        ):
            raise BadCoordinateError(
                f"Case {case_index}: players[{i}] must be an [x, y] pair of integers, got {entry!r}",
                token=entry,
                field="players",
                index=i,
            )
        players.append(PlayerModel(x=entry[0], y=entry[1]))
    return players


def _json_start(value, field: str, case_index: int) -> int:
    if _is_integer(value):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        try:
            return int(value.strip())
        except ValueError as e:
            raise BadStartIndexError(
                f"Case {case_index}: '{field}' is too long: {_abbreviate(value.strip())}",
                token=value,
                field=field,
                index=case_index,
            ) from e
    raise BadStartIndexError(
        f"Case {case_index}: '{field}' must be an integer, got {value!r}",
        token=value,
        field=field,
        index=case_index,
    )


def _scenario_from_json(scenario, case_index: int) -> ScenarioRequestModel:
    if not isinstance(scenario, dict):
        raise ParseError(f"Case {case_index} must be a JSON object", index=case_index)

    players = _json_players(scenario, case_index)

    direction_field, direction_value = _first_present(scenario, DIRECTION_ALIASES, case_index)
    if not isinstance(direction_value, str):
        raise BadDirectionError(
            f"Case {case_index}: '{direction_field}' must be a string, got {direction_value!r}",
            token=direction_value,
            field=direction_field,
            index=case_index,
        )
    try:
        start_direction = direction.encode(direction_value)
    except UnknownDirection as e:
        e.field = direction_field
        e.index = case_index
        raise

    start_field, start_value = _first_present(scenario, START_ALIASES, case_index)
    start = _json_start(start_value, start_field, case_index)
    start_index = _to_zero_based(start, len(players), field=start_field, index=case_index)

    return ScenarioRequestModel(
        players=tuple(players),
        start_direction=start_direction,
        start_index=start_index,
    )


def parse_json(text: str, *, first_only: bool = False) -> List[ScenarioRequestModel]:
    """Parse a JSON scenario object or an array of them."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e.msg} at position {e.pos}", position=e.pos) from e
    except ValueError as e:
        # Integers above the interpreter's digit limit fail outside JSONDecodeError.
        raise ParseError(f"Invalid JSON: {e}") from e

    if isinstance(document, dict):
        scenarios = [document]
    elif isinstance(document, list):
        scenarios = document
    else:
        raise ParseError("JSON document must be an object or an array of objects")

    if first_only:
        scenarios = scenarios[:1]
    return [_scenario_from_json(scenario, i) for i, scenario in enumerate(scenarios)]


def auto_parse_inputs(text, *, first_only: bool = False) -> List[ScenarioRequestModel]:
    """Parse a document, choosing JSON or text by its first non-blank character

    Args:
        text (str | bytes): The document. Bytes are decoded as UTF-8.
        first_only (bool, optional): Keep only the first case. Defaults to False.

    Raises:
        ParseError: If the document is malformed

    Returns:
        List[ScenarioRequestModel]: The cases in document order
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Input is not valid UTF-8: {e.reason}", position=e.start) from e

    stripped = text.lstrip("\ufeff").strip()
    if stripped.startswith(("[", "{")):
        return parse_json(stripped, first_only=first_only)
    return parse_text(stripped, first_only=first_only)

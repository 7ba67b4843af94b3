from typing import Iterable

from dodgeball.models.dc_models import ScenarioResultModel


def format_result(result: ScenarioResultModel, *, one_based: bool = True) -> str:
    """Render one result as "<throws> <last player>", the last player 1-based by default."""
    last_player = result.last_player + 1 if one_based else result.last_player
    return f"{result.throws} {last_player}"


def format_results(results: Iterable[ScenarioResultModel], *, one_based: bool = True) -> str:
    return "\n".join(format_result(result, one_based=one_based) for result in results)

import asyncio
import logging
from typing import List, Sequence

from dodgeball.client import DodgeballClient
from dodgeball.domain.scenario_parser import auto_parse_inputs
from dodgeball.formatter import format_results
from dodgeball.models.dc_models import ScenarioRequestModel, ScenarioResultModel


async def run_scenarios(
    client: DodgeballClient,
    requests: Sequence[ScenarioRequestModel],
    *,
    concurrent: bool = True,
) -> List[ScenarioResultModel]:
    """Run every scenario and return the results in request order

    Args:
        client (DodgeballClient): Client of the simulation service
        requests (Sequence[ScenarioRequestModel]): Parsed cases of one document
        concurrent (bool, optional): Issue all calls at once instead of one after another. Defaults to True.

    Returns:
        List[ScenarioResultModel]: results[i] belongs to requests[i]
    """
    if not concurrent:
        results = []
        for request in requests:
            results.append(await client.run_simulation(request))
        return results

    tasks = [asyncio.ensure_future(client.run_simulation(request)) for request in requests]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        # The first failure aborts the document; drop the calls still in flight.
        for task in tasks:
            task.cancel()
        raise


async def simulate_document(
    client: DodgeballClient,
    text,
    *,
    first_only: bool = False,
    concurrent: bool = True,
) -> str:
    """Parse a whole input document, simulate every case and format the answer.

    The document is parsed completely before the first call, so a malformed
    case never leaves a partial answer behind.
    """
    requests = auto_parse_inputs(text, first_only=first_only)
    logging.info(f"Simulating {len(requests)} case(s)")
    results = await run_scenarios(client, requests, concurrent=concurrent)
    return format_results(results)

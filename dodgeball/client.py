import logging

from dodgeball import wire_codec
from dodgeball.models.dc_models import ScenarioRequestModel, ScenarioResultModel
from dodgeball.transport import GrpcTransport


class DodgeballClient:
    """Call RunSimulation of the remote dodgeball service."""

    def __init__(self, transport: GrpcTransport):
        self.transport = transport

    async def run_simulation(self, request: ScenarioRequestModel) -> ScenarioResultModel:
        """Run one scenario on the remote service

        Args:
            request (ScenarioRequestModel): The scenario to simulate

        Returns:
            ScenarioResultModel: Number of throws and the 0-based index of the last player
        """
        if getattr(self.transport, "debug", False):
            try:
                logging.debug(
                    f"[gRPC] → {wire_codec.SERVICE_NAME}.{wire_codec.RUN_SIMULATION} "
                    f"@ {getattr(self.transport, 'address', '?')}"
                )
                logging.debug(f"[gRPC] → request JSON: {request.model_dump_json()}")
            except Exception:
                pass

        payload = wire_codec.encode_request(request)
        response = await self.transport.request(
            wire_codec.SERVICE_NAME, wire_codec.RUN_SIMULATION, payload
        )
        return wire_codec.decode_result(response)

"""
Pytest configuration and fixtures
"""
import asyncio

import grpc
import pytest

from dodgeball import wire_codec
from dodgeball.models.dc_models import ScenarioResultModel


async def _run_simulation(request: bytes, context) -> bytes:
    # Stand-in for the real service: report the start direction as the number
    # of throws and the start index as the last player.
    scenario = wire_codec.decode_request(request)
    return wire_codec.encode_result(
        ScenarioResultModel(throws=scenario.start_direction, last_player=scenario.start_index)
    )


async def _echo(request: bytes, context) -> bytes:
    return request


async def _empty(request: bytes, context) -> bytes:
    return b""


async def _fail(request: bytes, context) -> bytes:
    await context.abort(grpc.StatusCode.INVALID_ARGUMENT, "bad scenario")


async def _slow(request: bytes, context) -> bytes:
    await asyncio.sleep(2)
    return request


@pytest.fixture
async def server_address():
    """Start an in-process gRPC server speaking raw bytes and return its address"""
    handlers = {
        wire_codec.RUN_SIMULATION: grpc.unary_unary_rpc_method_handler(_run_simulation),
        "Echo": grpc.unary_unary_rpc_method_handler(_echo),
        "Empty": grpc.unary_unary_rpc_method_handler(_empty),
        "Fail": grpc.unary_unary_rpc_method_handler(_fail),
        "Slow": grpc.unary_unary_rpc_method_handler(_slow),
    }
    server = grpc.aio.server()
    server.add_generic_rpc_handlers(
        (grpc.method_handlers_generic_handler(wire_codec.SERVICE_NAME, handlers),)
    )
    port = server.add_insecure_port("127.0.0.1:0")
    await server.start()
    try:
        yield f"127.0.0.1:{port}"
    finally:
        await server.stop(None)


class FakeTransport:
    """Transport double that answers from a callable instead of the network"""

    def __init__(self, respond, debug=False):
        self.respond = respond
        self.debug = debug
        self.address = "fake:0"
        self.calls = []

    async def request(self, service, method, payload):
        self.calls.append((service, method, payload))
        return await self.respond(payload)


@pytest.fixture
def fake_transport_factory():
    return FakeTransport

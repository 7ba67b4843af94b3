"""
Tests for the raw bytes gRPC transport
"""
import asyncio
import logging

import grpc
import pytest

from dodgeball import wire_codec
from dodgeball.errors import TransportError
from dodgeball.transport import GrpcTransport, hex_preview, method_path

SERVICE = wire_codec.SERVICE_NAME


def test_method_path():
    assert method_path("dodgeball.DodgeballService", "RunSimulation") == (
        "/dodgeball.DodgeballService/RunSimulation"
    )


@pytest.mark.parametrize(
    "service, method",
    [("", "RunSimulation"), ("dodgeball.DodgeballService", ""), ("a/b", "Run"), ("svc", "Run/Sim")],
)
def test_method_path_rejects_malformed_names(service, method):
    with pytest.raises(TransportError):
        method_path(service, method)


def test_hex_preview():
    assert hex_preview(b"\x00\x0a\xff") == "00 0a ff"
    assert hex_preview(b"") == ""
    assert hex_preview(bytes(64)) == " ".join(["00"] * 64)
    assert hex_preview(bytes(65)) == " ".join(["00"] * 64) + " ..."


@pytest.mark.asyncio
async def test_echo_returns_identical_bytes(server_address):
    payload = bytes(range(256)) * 3
    async with GrpcTransport(server_address) as transport:
        response = await transport.request(SERVICE, "Echo", payload)
    assert response == payload


@pytest.mark.asyncio
async def test_empty_response(server_address):
    async with GrpcTransport(server_address) as transport:
        assert await transport.request(SERVICE, "Empty", b"\x01\x02") == b""


@pytest.mark.asyncio
async def test_remote_error_keeps_status(server_address):
    async with GrpcTransport(server_address) as transport:
        with pytest.raises(TransportError) as excinfo:
            await transport.request(SERVICE, "Fail", b"")
    assert excinfo.value.code == grpc.StatusCode.INVALID_ARGUMENT
    assert excinfo.value.details == "bad scenario"


@pytest.mark.asyncio
async def test_unknown_method(server_address):
    async with GrpcTransport(server_address) as transport:
        with pytest.raises(TransportError) as excinfo:
            await transport.request(SERVICE, "NoSuchMethod", b"")
    assert excinfo.value.code == grpc.StatusCode.UNIMPLEMENTED


@pytest.mark.asyncio
async def test_deadline_exceeded(server_address):
    async with GrpcTransport(server_address, timeout=0.1) as transport:
        with pytest.raises(TransportError) as excinfo:
            await transport.request(SERVICE, "Slow", b"")
    assert excinfo.value.code == grpc.StatusCode.DEADLINE_EXCEEDED


@pytest.mark.asyncio
async def test_payload_must_be_bytes(server_address):
    async with GrpcTransport(server_address) as transport:
        with pytest.raises(TransportError):
            await transport.request(SERVICE, "Echo", "not bytes")


@pytest.mark.asyncio
async def test_concurrent_calls_share_one_channel(server_address):
    payloads = [bytes([i]) * (i + 1) for i in range(20)]
    async with GrpcTransport(server_address) as transport:
        responses = await asyncio.gather(
            *(transport.request(SERVICE, "Echo", payload) for payload in payloads)
        )
    assert responses == payloads


@pytest.mark.asyncio
async def test_debug_traces_payload_and_response(server_address, caplog):
    caplog.set_level(logging.DEBUG)
    payload = bytes(100)
    async with GrpcTransport(server_address, debug=True) as transport:
        await transport.request(SERVICE, "Echo", payload)

    messages = [record.getMessage() for record in caplog.records]
    assert any("Echo payload: 100 bytes (showing first 64)" in m for m in messages)
    assert any("Echo response: 100 bytes (showing first 64)" in m for m in messages)
    assert any(m.endswith(" ".join(["00"] * 64) + " ...") for m in messages)


@pytest.mark.asyncio
async def test_no_trace_without_debug(server_address, caplog):
    caplog.set_level(logging.DEBUG)
    async with GrpcTransport(server_address) as transport:
        await transport.request(SERVICE, "Echo", b"\x01")
    assert not any("[gRPC]" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_trace_failure_does_not_affect_call(server_address, monkeypatch):
    def broken_preview(data, limit=64):
        raise RuntimeError("boom")

    monkeypatch.setattr("dodgeball.transport.hex_preview", broken_preview)
    async with GrpcTransport(server_address, debug=True) as transport:
        assert await transport.request(SERVICE, "Echo", b"abc") == b"abc"


@pytest.mark.asyncio
async def test_debug_traces_remote_error(server_address, caplog):
    caplog.set_level(logging.DEBUG)
    async with GrpcTransport(server_address, debug=True) as transport:
        with pytest.raises(TransportError):
            await transport.request(SERVICE, "Fail", b"")
    assert any("Fail error:" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_error_trace_failure_keeps_transport_error(server_address, monkeypatch):
    def broken_debug(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("dodgeball.transport.logging.debug", broken_debug)
    async with GrpcTransport(server_address, debug=True) as transport:
        with pytest.raises(TransportError) as excinfo:
            await transport.request(SERVICE, "Fail", b"")
        assert await transport.request(SERVICE, "Echo", b"xyz") == b"xyz"
    assert excinfo.value.code == grpc.StatusCode.INVALID_ARGUMENT

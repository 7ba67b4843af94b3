import logging

import grpc

from dodgeball.errors import TransportError

TRACE_LIMIT = 64


def method_path(service: str, method: str) -> str:
    """Build the fully qualified gRPC method path /<package>.<Service>/<Method>."""
    for name, value in (("service", service), ("method", method)):
        if not isinstance(value, str) or not value or "/" in value or value != value.strip():
            raise TransportError(f"Invalid {name} name for method path: {value!r}")
    return f"/{service}/{method}"


def hex_preview(data: bytes, limit: int = TRACE_LIMIT) -> str:
    """Hex dump of at most ``limit`` bytes, ending with '...' when the data is longer."""
    text = data[:limit].hex(" ")
    if len(data) > limit:
        text += " ..."
    return text


class GrpcTransport:
    """Send raw request bytes to a unary gRPC method and return the raw response bytes.

    The channel is opened once and shared by every call. Calls keep no
    per-call state on the instance, so any number of them may be in flight.

    Args:
        address (str): host:port of the simulation service
        debug (bool, optional): Log the size and a hex dump of every payload and response. Defaults to False.
        credentials (grpc.ChannelCredentials, optional): Use a secure channel with these credentials. Defaults to None (insecure).
        timeout (float, optional): Deadline of each call in seconds. Defaults to None (no deadline).
        channel (grpc.aio.Channel, optional): Use an already opened channel instead of creating one
    """

    def __init__(self, address: str, *, debug=False, credentials=None, timeout=None, channel=None):
        self.address = address
        self.debug = debug
        self.timeout = timeout
        if channel is not None:
            self._channel = channel
        elif credentials is not None:
            self._channel = grpc.aio.secure_channel(address, credentials)
        else:
            self._channel = grpc.aio.insecure_channel(address)

    async def request(self, service: str, method: str, payload: bytes) -> bytes:
        """Perform one unary call

        Args:
            service (str): Fully qualified service name, e.g. dodgeball.DodgeballService
            method (str): Method name, e.g. RunSimulation
            payload (bytes): Serialized request message

        Raises:
            TransportError: If the method path or payload is invalid or the call fails

        Returns:
            bytes: Serialized response message, b"" when the call returned no body
        """
        path = method_path(service, method)
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise TransportError(f"Payload must be bytes, got {type(payload).__name__}")
        payload = bytes(payload)

        if self.debug:
            self._trace("→", service, method, "payload", payload)

        # No serializers: the channel sends and returns the raw bytes.
        call = self._channel.unary_unary(path)
        try:
            response = await call(payload, timeout=self.timeout)
        except grpc.aio.AioRpcError as e:
            if self.debug:
                self._trace_error(service, method, e)
            raise TransportError(
                f"{path} failed with {e.code()}: {e.details()}",
                code=e.code(),
                details=e.details(),
            ) from e
        except grpc.aio.UsageError as e:
            raise TransportError(f"{path} could not be called: {e}") from e

        response = bytes(response) if response is not None else b""
        if self.debug:
            self._trace("←", service, method, "response", response)
        return response

    def _trace(self, arrow: str, service: str, method: str, label: str, data: bytes):
        try:
            truncated = f" (showing first {TRACE_LIMIT})" if len(data) > TRACE_LIMIT else ""
            logging.debug(f"[gRPC] {arrow} {service}.{method} {label}: {len(data)} bytes{truncated}")
            logging.debug(f"[gRPC] {arrow} {service}.{method} hex: {hex_preview(data)}")
        except Exception:
            # tracing is best-effort only
            pass

    def _trace_error(self, service: str, method: str, error: grpc.aio.AioRpcError):
        try:
            logging.debug(f"[gRPC] ← {service}.{method} error: {error.code()} {error.details()}")
        except Exception:
            pass

    async def close(self):
        await self._channel.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dodgeball.client import DodgeballClient
from dodgeball.errors import DodgeballError
from dodgeball.load_settings import load_settings
from dodgeball.services.simulation import simulate_document
from dodgeball.transport import GrpcTransport


async def _run(path: Path, address: str, debug: bool, timeout, first_only: bool, concurrent: bool) -> str:
    async with GrpcTransport(address, debug=debug, timeout=timeout) as transport:
        client = DodgeballClient(transport)
        return await simulate_document(
            client, path.read_bytes(), first_only=first_only, concurrent=concurrent
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings()
    p = argparse.ArgumentParser(prog="dodgeball", description="Simulate dodgeball scenarios on a remote service")
    p.add_argument("input", type=Path, help="Text or JSON scenario document")
    p.add_argument("--address", default=settings.address, help="host:port of the simulation service")
    p.add_argument("--timeout", type=float, default=settings.timeout, help="Deadline of each call in seconds")
    p.add_argument("--first-only", action="store_true", help="Only simulate the first case")
    p.add_argument("--sequential", action="store_true", help="Call the service one case at a time")
    p.add_argument("--debug", action="store_true", default=settings.debug, help="Trace every gRPC payload")
    args = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else settings.log_level)

    try:
        out = asyncio.run(
            _run(
                args.input,
                args.address,
                args.debug,
                args.timeout,
                args.first_only,
                settings.concurrent and not args.sequential,
            )
        )
    except (DodgeballError, OSError) as e:
        logging.error(f"{type(e).__name__}: {e}")
        return 1
    print(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())

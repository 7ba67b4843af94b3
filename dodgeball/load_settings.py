import dataclasses as dc
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ADDRESS = "127.0.0.1:50051"


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "y", "on"):
        return True
    if lowered in ("0", "false", "no", "n", "off"):
        return False
    raise ValueError(f"Invalid boolean value: {value}")


@dc.dataclass(frozen=True)
class Settings:
    address: str = DEFAULT_ADDRESS
    debug: bool = False  # trace every gRPC payload and response
    timeout: Optional[float] = None
    concurrent: bool = True
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read the settings from the environment (and .env) once, at startup."""
    timeout = os.getenv("DODGEBALL_TIMEOUT")
    return Settings(
        address=os.getenv("DODGEBALL_ADDRESS") or DEFAULT_ADDRESS,
        debug=parse_bool(os.getenv("DODGEBALL_DEBUG")),
        timeout=float(timeout) if timeout else None,
        concurrent=parse_bool(os.getenv("DODGEBALL_CONCURRENT"), default=True),
        log_level=os.getenv("LOG_LEVEL") or "INFO",
    )


if __name__ == "__main__":
    print(load_settings())

"""Domain layer (pure logic).

- Direction codes and scenario document parsing live here.
- Avoid I/O: no gRPC channels, no HTTP/FastAPI.
- Prefer deterministic functions.
"""

"""Process entrypoint: ``python -m src.scripts.serve [port]``.

The optional positional argument overrides ``MEDIA_PORT``. A missing or
invalid value falls back to the configured default.
"""

from __future__ import annotations

import sys

import uvicorn

from src.config.server import MEDIA_HOST, MEDIA_PORT, parse_port

PORT_ARG_INDEX = 1


def resolve_port(argv: list[str]) -> int:
    if len(argv) <= PORT_ARG_INDEX:
        return MEDIA_PORT
    return parse_port(argv[PORT_ARG_INDEX], default=MEDIA_PORT)


def main() -> int:
    uvicorn.run("src.server:app", host=MEDIA_HOST, port=resolve_port(sys.argv), log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Run the relay with uvicorn: ``python -m relay``."""

from __future__ import annotations

import uvicorn

from .config import HOST, PORT


def main() -> None:
    uvicorn.run("relay.server:app", host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    main()

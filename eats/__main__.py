"""Run the API server: `python -m eats`."""

import uvicorn

from eats.config import settings


def main() -> None:
    uvicorn.run(
        "eats.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

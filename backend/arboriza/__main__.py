"""Run the API with uvicorn: `python -m arboriza`."""

import uvicorn

from arboriza.config import settings


def main() -> None:
    uvicorn.run(
        "arboriza.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""
Entry point: `python -m microblog` (or the `microblog` console script).

Serves the API with uvicorn on HOST:PORT (PORT defaults to 3000).
"""

import uvicorn

from microblog.config import settings


def main() -> None:
    uvicorn.run(
        "microblog.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

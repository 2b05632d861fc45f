"""
Run the API server: python -m meapi
"""

import uvicorn

from meapi.core import settings


def main() -> None:
    uvicorn.run("meapi.main:app", host=settings.host(), port=settings.port(), log_level=settings.log_level().lower())


if __name__ == "__main__":
    main()

"""ASGI entrypoint for the creation studio API."""

import uvicorn

from creation_studio.api.app import create_app
from creation_studio.config import Settings
from creation_studio.containers import build_container

settings = Settings()
app = create_app(build_container(settings))


def main() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

import uvicorn

from intake.api.app import create_app
from intake.config.settings import Settings


def main() -> None:
    """Entry point: load settings -> build the app -> serve it."""
    settings = Settings()
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

import uvicorn

from aurorasubmit.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "aurorasubmit.api.app:create_app",
        factory=True,
        host=settings.web_host,
        port=settings.web_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()

import logging

from .config import TogglSettings, configure_logging
from .server import build_server

logger = logging.getLogger("toggl_mcp")


def main() -> None:
    settings = TogglSettings.from_env()
    configure_logging(settings.log_level)
    if not settings.has_token:
        logger.warning(
            "TOGGL_API_TOKEN is not set; every tool call will report a configuration error"
        )
    build_server(settings).run()


if __name__ == "__main__":
    main()

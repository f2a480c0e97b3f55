import logging
import sys

from terrain.settings import settings

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
HANDLER_NAME = "terrain"

# Routes and services log their own request lines.
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def _formatter(json_lines: bool) -> logging.Formatter:
    if not json_lines:
        return logging.Formatter(TEXT_FORMAT)

    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(fmt=JSON_FORMAT, rename_fields={"asctime": "timestamp", "levelname": "level"})


def configure_logging(level: str | None = None, json_lines: bool | None = None) -> None:
    """Install the terrain stderr handler on the root logger.

    ``level`` and ``json_lines`` override ``TERRAIN_LOG_LEVEL`` and
    ``TERRAIN_LOG_JSON``; unknown level names fall back to INFO. Calling it
    again replaces the handler from the previous call and leaves other
    handlers on the root logger in place.
    """
    level_name = (level or settings.log_level).upper()
    resolved = logging.getLevelNamesMapping().get(level_name, logging.INFO)
    use_json = settings.log_json if json_lines is None else json_lines

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(_formatter(use_json))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.setLevel(resolved)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

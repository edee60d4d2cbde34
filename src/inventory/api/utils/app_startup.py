import logging
import sys
from pathlib import Path

from loguru import logger

from src.inventory.runtime.config.config_data import LoggingConfig
from src.inventory.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# stdlib loggers pinned to a level regardless of the configured one
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Redirect standard 'logging' records to Loguru, with selective drops."""

    def emit(self, record: logging.LogRecord) -> None:
        # Request logging middleware already records every request
        if record.name == "uvicorn.access":
            return

        # The middleware logs exceptions with request context
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(
            depth=2,
            exception=record.exc_info,
        ).bind(logger_name=record.name).log(level, record.getMessage())


def _add_console_sink(cfg: LoggingConfig, verbose_errors: bool) -> None:
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )


def _add_file_sink(cfg: LoggingConfig, verbose_errors: bool) -> None:
    """Rotating file sink; one JSON object per line when ``format`` is json."""
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else PLAIN_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )


def _route_stdlib_logging() -> None:
    # force=True drops handlers installed by uvicorn or libraries
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict.keys()):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging() -> None:
    """Install loguru sinks from ``config.logging`` and route stdlib logging into them.

    Every record carries ``extra["request_id"]``; it is ``-`` outside a request.
    Tracebacks include local variables everywhere except production.
    """
    main_config = get_config()
    cfg = main_config.logging
    env = main_config.app.environment
    verbose_errors = env != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-"})

    _add_console_sink(cfg, verbose_errors)
    if cfg.file:
        _add_file_sink(cfg, verbose_errors)
    _route_stdlib_logging()

    logger.info(
        "Logging configured",
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=env,
    )

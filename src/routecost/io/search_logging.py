# io/search_logging.py
import json
import logging
import sys

from routecost.search.hooks import NoopHooks


def _default_json_logger(name="routecost", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class SearchLogging(NoopHooks):
    """
    Structured logs for the search lifecycle. Expansions are only logged in
    debug mode, one in every ``sample_every``.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)
        self._mode = None

    def _emit(self, level: int, msg: str, **extra):
        self.log.log(level, msg, extra={"extra": {"run_id": self.run_id, "mode": self._mode, **extra}})

    def search_start(self, *, mode, origin_edges, destination_edges):
        self._mode = mode
        self._emit(
            logging.INFO, "search_start", origin_edges=origin_edges, destination_edges=destination_edges
        )

    def search_end(self, *, status, **extra):
        self._emit(logging.INFO, "search_end", status=status, **extra)

    def expand(self, label, *, expansions, qsize):
        if self.debug and expansions % self.sample_every == 0:
            self._emit(
                logging.DEBUG,
                "expand",
                edge_id=label.edge_id,
                cost=label.cost,
                sortcost=label.sortcost,
                expansions=expansions,
                qsize=qsize,
            )

    def error(self, *, reason: str, exc: BaseException, **extra):
        self._emit(logging.ERROR, "search_error", reason=reason, error=str(exc), **extra)

"""Structured scan logging."""

import logging

logger = logging.getLogger(__name__)


def _format(data: dict[str, object]) -> str:
    return " | ".join(f"{k}={v}" for k, v in data.items())


class LogService:
    """Service for structured logging of scan events.

    Emits ``key=value | key=value`` lines so CI logs stay greppable.
    """

    def file_scanned(self, path: str, candidates: int, forwards: int) -> None:
        """Log a successfully analysed file.

        Args:
            path: Source file
            candidates: Key-lookup candidates found
            forwards: JSX translator forwards queued

        """
        logger.debug(
            _format({"event": "file_scanned", "file": path, "candidates": candidates, "forwards": forwards})
        )

    def file_failed(self, path: str, error: str) -> None:
        """Log a file excluded from analysis.

        Args:
            path: Source file
            error: Failure description

        """
        logger.error(_format({"event": "file_failed", "file": path, "error": error}))

    def run_finished(self, data: dict[str, object]) -> None:
        """Log the run summary.

        Args:
            data: Summary counts

        """
        logger.info(_format({"event": "run_finished", **data}))

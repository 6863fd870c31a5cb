import logging

from flask import render_template

log = logging.getLogger(__name__)


class ExplorerError(Exception):
    """Base for every per-request failure the explorer reports to a client."""

    status = 500
    message = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class NotFound(ExplorerError):
    status = 404
    message = "Not Found"


class Forbidden(ExplorerError):
    """Path resolves outside the root, or the entry is unreadable."""

    status = 403
    message = "Forbidden"


class IoFailure(ExplorerError):
    """Unexpected I/O condition. `cause` is for the log only."""

    status = 500
    message = "Internal Server Error"

    def __init__(self, cause: BaseException, message=None):
        super().__init__(message)
        self.cause = cause


def present(error: ExplorerError) -> tuple[int, str]:
    """Render the failure page for `error`. Never includes the cause."""
    if isinstance(error, IoFailure):
        log.error("I/O error: %r", error.cause)
    elif isinstance(error, Forbidden):
        log.warning("%s %s", error.status, error.message)
    else:
        log.debug("%s %s", error.status, error.message)

    body = render_template("error.html", status=error.status, message=error.message)
    return error.status, body

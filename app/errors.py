"""Failure taxonomy shared by the calendar engine and the deal pipeline."""


class TripzError(Exception):
    """Base class for errors raised by the core."""


class UpstreamUnavailable(TripzError):
    """A fetch collaborator answered with a non-success status or not at all."""

    def __init__(self, service: str, status_code: int | None = None, detail: str | None = None) -> None:
        self.service = service
        self.status_code = status_code
        self.detail = detail
        msg = f"{service} request failed"
        if status_code is not None:
            msg = f"{msg}: {status_code}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class DataMissing(TripzError):
    """A well-formed upstream response lacked a field we depend on."""

    def __init__(self, field: str, service: str | None = None) -> None:
        self.field = field
        self.service = service
        where = f" in {service} response" if service else ""
        super().__init__(f"Missing {field}{where}")


class InvalidArgument(TripzError, ValueError):
    """Malformed input parameters."""

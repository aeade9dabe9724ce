class DashboardError(Exception):
    """Base class for dashboard errors."""


class FetchFailure(DashboardError):
    """An upstream query failed or returned data we could not read.

    ``source`` names the query (``latest``, ``history`` or ``ping``) so logs and
    metrics can tell which side of a refresh cycle broke.
    """

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message

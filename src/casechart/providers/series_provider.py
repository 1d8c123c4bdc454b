"""Series provider protocol."""

from typing import Protocol

from casechart.domain.models import Series


class SeriesProvider(Protocol):
    """
    Protocol for case data sources.

    Implementations fetch the full history from the remote source and must
    not touch the cache; persisting the result is the caller's job.
    """

    def fetch(self) -> Series:
        """
        Fetch and parse the full series.

        Raises NetworkError if the source cannot be reached and
        MalformedResponseError if the payload lacks the expected fields.
        """
        ...

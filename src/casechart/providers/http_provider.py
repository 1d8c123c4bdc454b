"""HTTP provider reading case counts from an open-data endpoint."""

import csv
import io
import json
import logging
from typing import Any, Optional

import requests

from casechart import __version__
from casechart.core.exceptions import MalformedResponseError, NetworkError
from casechart.core.timezone import parse_source_date
from casechart.domain.models import DataPoint, Series, ROLLING_WINDOW_DAYS

logger = logging.getLogger(__name__)

USER_AGENT = f"casechart/{__version__}"


class HttpSeriesProvider:
    """
    Downloads the case history with a single GET request.

    Understands ArcGIS feature-service JSON ({"features": [{"attributes": ...}]}),
    a plain JSON list of records, and delimited CSV with a header row.
    Only the configured date and count field names are looked at.
    """

    def __init__(
        self,
        url: str,
        date_field: str,
        count_field: str,
        timeout: float = 10.0,
        csv_delimiter: str = ";",
        rolling_window: int = ROLLING_WINDOW_DAYS,
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._date_field = date_field
        self._count_field = count_field
        self._timeout = timeout
        self._csv_delimiter = csv_delimiter
        self._rolling_window = rolling_window
        self._session = session or requests.Session()

    def fetch(self) -> Series:
        """Download, decode and build the series."""
        logger.debug("Reading case data from %s", self._url)
        try:
            response = self._session.get(
                self._url,
                headers={"User-Agent": USER_AGENT},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkError(f"Could not download case data: {exc}") from exc

        records = self._decode(response.content, response.headers.get("Content-Type", ""))
        points = self._to_points(records)
        logger.info("Fetched %d data points from %s", len(points), self._url)
        return Series.build(points, rolling_window=self._rolling_window)

    def _decode(self, content: bytes, content_type: str) -> list[Any]:
        stripped = content.lstrip(b"\xef\xbb\xbf \t\r\n")
        if "json" in content_type or stripped[:1] in (b"{", b"["):
            return self._decode_json(content)
        return self._decode_csv(content)

    def _decode_json(self, content: bytes) -> list[Any]:
        try:
            payload = json.loads(content)
        except ValueError as exc:
            raise MalformedResponseError(f"Response is not valid JSON: {exc}") from exc

        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            if "error" in payload:
                raise MalformedResponseError(f"Data source reported an error: {payload['error']}")
            features = payload.get("features")
            if isinstance(features, list):
                try:
                    return [feature["attributes"] for feature in features]
                except (KeyError, TypeError) as exc:
                    raise MalformedResponseError("Feature without attributes in response") from exc
        raise MalformedResponseError("Response contains neither a record list nor features")

    def _decode_csv(self, content: bytes) -> list[Any]:
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedResponseError(f"Response is not UTF-8 text: {exc}") from exc

        try:
            reader = csv.DictReader(io.StringIO(text), delimiter=self._csv_delimiter)
            fieldnames = reader.fieldnames or []
            missing = {self._date_field, self._count_field} - set(fieldnames)
            if missing:
                raise MalformedResponseError(f"Missing required columns: {sorted(missing)}")
            return list(reader)
        except csv.Error as exc:
            raise MalformedResponseError(f"Response is not valid CSV: {exc}") from exc

    def _to_points(self, records: list[Any]) -> list[DataPoint]:
        points = []
        for row_num, record in enumerate(records, start=1):
            if not isinstance(record, dict):
                raise MalformedResponseError(f"Record {row_num} is not an object")
            if self._date_field not in record or self._count_field not in record:
                raise MalformedResponseError(
                    f"Record {row_num} lacks field {self._date_field!r} or {self._count_field!r}"
                )

            raw_date = record[self._date_field]
            if raw_date is None or raw_date == "":
                logger.debug("Skipping record %d without a date", row_num)
                continue

            try:
                day = parse_source_date(raw_date)
                cases = _parse_count(record[self._count_field])
                points.append(DataPoint(day, cases))
            except (ValueError, TypeError, OverflowError) as exc:
                raise MalformedResponseError(f"Record {row_num}: {exc}") from exc
        return points


def _parse_count(value: Any) -> int:
    """Parse a case count; missing values count as zero."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"invalid case count {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"case count is not a whole number: {value}")
        return int(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        number = float(text)
        if not number.is_integer():
            raise ValueError(f"case count is not a whole number: {text}")
        return int(number)

# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""JSON HTTP service for moon age, rise and set.

Local HTTP server (stdlib only). One request computes one MoonInfo; the
server keeps no state besides the immutable deployment settings, so
requests are handled on independent threads.

Endpoints:
    POST /api/moon-info   {"date": ..., "latitude": ..., "longitude": ...}
    GET  /api/moon-age?date=YYYY-MM-DD
    GET  /api/health

Usage:
    hoshiyomi serve --port 50051
"""

import json
import logging
import math
from datetime import date, datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from hoshiyomi.domain.coordinate_frames import GeoPosition
from hoshiyomi.domain.epoch import civil_date, validate_civil_date
from hoshiyomi.domain.errors import InvalidInputError, NonConvergenceError
from hoshiyomi.domain.moon_age import moon_age
from hoshiyomi.domain.moon_info import (
    compute_moon_info,
    moon_info_to_dict,
    parse_date,
)
from hoshiyomi.domain.settings import EphemerisSettings, DEFAULT_SETTINGS


logger = logging.getLogger(__name__)

DEFAULT_PORT = 50051


def _normalize_timestamp(text: str) -> str:
    """Normalize ISO timestamp string: replace trailing 'Z' with '+00:00'."""
    if text.endswith("Z"):
        return text[:-1] + "+00:00"
    return text


def _instant_date(instant: datetime, settings: EphemerisSettings) -> date:
    try:
        day = civil_date(instant, settings)
    except OverflowError:
        raise InvalidInputError(f"timestamp out of range: {instant.isoformat()}") from None
    return validate_civil_date(day)


def request_date(value: Any, settings: EphemerisSettings) -> date:
    """
    Civil date of a request's `date` field.

    Accepts a YYYY-MM-DD date, an ISO-8601 timestamp, or Unix seconds.
    Timestamps are instants: naive ones are read as UTC, then every instant
    is converted into the deployment zone before taking its date.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"invalid date {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidInputError(f"invalid timestamp {value!r}")
        try:
            instant = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise InvalidInputError(f"timestamp out of range: {value!r}") from None
        return _instant_date(instant, settings)
    if not isinstance(value, str):
        raise InvalidInputError(f"missing or invalid date: {value!r}")

    text = value.strip()
    if "T" not in text and " " not in text:
        return parse_date(text)
    try:
        instant = datetime.fromisoformat(_normalize_timestamp(text))
    except ValueError:
        raise InvalidInputError(f"invalid timestamp {value!r}") from None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return _instant_date(instant, settings)


def _coordinate(body: dict[str, Any], key: str) -> float:
    value = body.get(key)
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"missing or invalid {key}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{key} must be a number, got {value!r}") from None


class MoonInfoHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the moon API."""

    # Set by create_moon_server
    settings: EphemerisSettings = DEFAULT_SETTINGS

    def log_message(self, format: str, *args: Any) -> None:
        """Route request lines to the module logger instead of stderr."""
        logger.debug(format, *args)

    def _set_headers(self, status: int = 200, content_type: str = "application/json") -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.end_headers()

    def _json_response(self, data: Any, status: int = 200) -> None:
        self._set_headers(status, "application/json")
        self.wfile.write(json.dumps(data).encode())

    def _error_response(self, status: int, message: str) -> None:
        self._json_response({"error": message}, status)

    def _read_body(self) -> dict[str, Any]:
        try:
            length = int(self.headers.get("Content-Length", 0))
        except ValueError:
            raise InvalidInputError("invalid Content-Length header") from None
        if length <= 0:
            return {}
        raw = self.rfile.read(length)
        try:
            body = json.loads(raw.decode())
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidInputError(f"malformed JSON body: {e}") from None
        if not isinstance(body, dict):
            raise InvalidInputError("request body must be a JSON object")
        return body

    # --- GET ---

    def do_GET(self) -> None:
        url = urlparse(self.path)

        if url.path == "/api/health":
            self._json_response({
                "status": "ok",
                "zone_offset_hours": self.settings.zone_offset_hours,
            })
            return

        if url.path == "/api/moon-age":
            query = parse_qs(url.query)
            try:
                day = request_date(query.get("date", [None])[0], self.settings)
                age = moon_age(day, self.settings)
            except InvalidInputError as e:
                self._error_response(400, str(e))
                return
            except NonConvergenceError as e:
                logger.warning("Moon age failed for %s: %s", url.query, e)
                self._error_response(422, str(e))
                return
            self._json_response({"date": day.isoformat(), "moon_age": round(age, 6)})
            return

        self._error_response(404, "Not found")

    # --- POST ---

    def do_POST(self) -> None:
        if urlparse(self.path).path == "/api/moon-info":
            self._handle_moon_info()
            return

        self._error_response(404, "Not found")

    def _handle_moon_info(self) -> None:
        try:
            body = self._read_body()
            day = request_date(body.get("date"), self.settings)
            position = GeoPosition(
                latitude_deg=_coordinate(body, "latitude"),
                longitude_deg=_coordinate(body, "longitude"),
            )
            info = compute_moon_info(day, position, self.settings)
        except InvalidInputError as e:
            self._error_response(400, str(e))
            return
        except NonConvergenceError as e:
            logger.warning("Moon info failed: %s", e)
            self._error_response(422, str(e))
            return

        logger.info(
            "moon-info %s lat=%.4f lon=%.4f age=%.3f",
            day.isoformat(), position.latitude_deg, position.longitude_deg, info.age_days,
        )
        self._json_response(moon_info_to_dict(info))


def create_moon_server(
    settings: EphemerisSettings = DEFAULT_SETTINGS,
    host: str = "localhost",
    port: int = DEFAULT_PORT,
) -> ThreadingHTTPServer:
    """Create an HTTP server for the moon API.

    Args:
        settings: Deployment settings shared by every request.
        host: Interface to bind.
        port: Port to serve on.

    Returns:
        ThreadingHTTPServer ready to serve_forever().
    """
    # Create handler class bound to the deployment settings
    handler = type(
        "BoundMoonInfoHandler",
        (MoonInfoHandler,),
        {"settings": settings},
    )

    server = ThreadingHTTPServer((host, port), handler)
    return server

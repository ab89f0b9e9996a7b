"""Fake transports and canned provider payloads."""

from __future__ import annotations

from typing import Any

import httpx

KHARKIV_CURRENT: dict[str, Any] = {
    "location": {"name": "Kharkiv", "country": "Ukraine"},
    "current": {
        "last_updated_epoch": 1767261600,
        "last_updated": "2026-01-01 12:00",
        "temp_c": 2.1,
        "condition": {"text": "Sunny", "code": 1000},
        "humidity": 67.0,
        "pressure_mb": 1028.0,
        "wind_kph": 10.4,
        "wind_degree": 95,
    },
}

LONDON_OPENWEATHER: dict[str, Any] = {
    "weather": [{"id": 804, "main": "Clouds", "description": "overcast clouds"}],
    "main": {"temp": 11.5, "pressure": 1012, "humidity": 81},
    "wind": {"speed": 5.0, "deg": 240},
    "dt": 1767261600,
    "name": "London",
    "cod": 200,
}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        exc: BaseException | None = None,
    ) -> None:
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if exc is not None:
                raise exc
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json)

        super().__init__(handler)

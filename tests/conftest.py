from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx
import pytest

from services.weatherlink import WeatherLinkClient

BASE_URL = "https://api.test/v2"

STATION = {
    "station_id": 1,
    "station_id_uuid": "u1",
    "station_name": "Rooftop",
    "latitude": 47.5,
    "longitude": 9.7,
    "elevation": 400,
    "time_zone": "Europe/Vienna",
    "subscription_type": "Pro",
}


def station_payload(generated_at: int = 170, sensors: List[Dict[str, Any]] | None = None) -> Dict[str, Any]:
    return {
        "station_id_uuid": "u1",
        "station_id": 1,
        "generated_at": generated_at,
        "sensors": sensors or [],
    }


class Recorder:
    """Routes requests by path to canned responses and remembers every call."""

    def __init__(self, routes: Dict[str, Callable[[httpx.Request], httpx.Response]]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v2")
        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"message": f"no route for {path}"})
        return handler(request)

    @property
    def paths(self) -> List[str]:
        return [request.url.path.removeprefix("/v2") for request in self.requests]


def json_route(body: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda _request: httpx.Response(status_code, json=body)


@pytest.fixture()
def make_client() -> Callable[[Recorder], WeatherLinkClient]:
    def factory(recorder: Recorder) -> WeatherLinkClient:
        http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(recorder))
        return WeatherLinkClient(api_key="k", api_secret="s", http_client=http_client)

    return factory

"""Async client for the BKK FUTÁR transit information service."""

from __future__ import annotations

import inspect
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx

from .config import (
    DEFAULT_IF_MODIFIED_SINCE,
    DEFAULT_MAX_TRANSFERS,
    DEFAULT_MAX_WALK_DISTANCE,
    DEFAULT_MINUTES_AFTER,
    DEFAULT_MINUTES_BEFORE,
    DEFAULT_MODES,
    DEFAULT_NUM_ITINERARIES,
    DEFAULT_OPTIMIZE,
    OPTIMIZE_CHOICES,
    TRIANGLE_DEFAULTS,
    ClientConfig,
    Settings,
    get_settings,
)
from .utils.exceptions import InvalidArgumentError, ServiceError
from .utils.formatters import (
    format_day,
    format_place,
    join_modes,
    service_timezone,
    split_date_time,
)
from .utils.logger import LoggerMixin, log_api_call
from .utils.validators import (
    Options,
    fallback,
    normalize_query,
    normalize_route,
    normalize_stop,
    require_fields,
)

Callback = Callable[..., Any]
Request = Tuple[str, Dict[str, Any]]

PLAN_TRIP_REQUIRED = ("fromLat", "fromLon", "toLat", "toLon")
LOCATION_REQUIRED = ("lat", "lon", "radius")


class FutarClient(LoggerMixin):
    """One coroutine per service endpoint.

    Stop and route scoped methods take either a bare identifier string or an
    options mapping keyed by the service's parameter names (``stopId``,
    ``minutesAfter``, ...). Every method also accepts an optional ``callback``
    which is called exactly once, as ``callback(None, data)`` on success or
    ``callback(error)`` on failure; the awaited result is the same either way.
    """

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any], None] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Create a client.

        Args:
            config: ``ClientConfig`` or a mapping with ``apiKey``, ``version``
                and ``includeReferences``; defaults come from settings
            base_url: Service root, overriding ``FUTAR_BASE_URL``
            timeout: Seconds per request. Only used for the client opened per
                call; an injected ``http_client`` keeps its own timeout.
            http_client: Shared ``httpx.AsyncClient`` to send requests with
            settings: Settings to use instead of ``get_settings()``
        """
        self._settings = settings or get_settings()
        if config is None:
            self.config = ClientConfig.from_settings(self._settings)
        else:
            self.config = ClientConfig.coerce(config)
        self.base_url = (base_url or self._settings.base_url).rstrip("/")
        self.timeout = timeout or self._settings.api_timeout
        self._http_client = http_client
        self._tz = service_timezone(self._settings.timezone)

    # ------------------------------------------------------------------
    # Stop scoped endpoints
    # ------------------------------------------------------------------

    async def arrivals_and_departures_for_stop(
        self, opts: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Arrivals and departures at a stop.

        Args:
            opts: Stop id, or mapping with ``stopId`` and optional
                ``minutesBefore`` (0), ``minutesAfter`` (30),
                ``onlyDepartures`` (true), ``includeReferences``, ``version``
            callback: Optional ``(error, data)`` callback

        Returns:
            The ``data`` field of the service response
        """
        return await self._dispatch(self._arrivals_and_departures_request, opts, callback)

    def _arrivals_and_departures_request(self, opts: Options) -> Request:
        opts = normalize_stop(opts)
        params = {
            "stopId": opts["stopId"],
            "minutesBefore": fallback(opts.get("minutesBefore"), DEFAULT_MINUTES_BEFORE),
            "minutesAfter": fallback(opts.get("minutesAfter"), DEFAULT_MINUTES_AFTER),
            "onlyDepartures": fallback(opts.get("onlyDepartures"), True),
            **self._common_params(opts),
        }
        return "/arrivals-and-departures-for-stop.json", params

    async def schedule_for_stop(
        self, opts: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Timetable of a stop for one day (``day`` as ``YYYY-MM-DD`` or a date, default today)."""
        return await self._dispatch(self._schedule_request, opts, callback)

    def _schedule_request(self, opts: Options) -> Request:
        opts = normalize_stop(opts)
        params = {
            "stopId": opts["stopId"],
            "day": format_day(opts.get("day"), self._tz),
            **self._common_params(opts),
        }
        return "/schedule-for-stop.json", params

    async def route_details_for_stop(
        self, opts: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Details of the routes serving a stop."""
        return await self._dispatch(self._route_details_for_stop_request, opts, callback)

    def _route_details_for_stop_request(self, opts: Options) -> Request:
        opts = normalize_stop(opts)
        # This endpoint has never been sent a version parameter.
        params = {
            "stopId": opts["stopId"],
            "includeReferences": self._include_references(opts),
        }
        return "/route-details-for-stop.json", params

    async def vehicles_for_stop(
        self, opts: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Vehicles approaching a stop.

        ``ifModifiedSince`` (unix timestamp, default 0) limits the answer to
        data changed since then.
        """
        return await self._dispatch(self._vehicles_request, opts, callback)

    def _vehicles_request(self, opts: Options) -> Request:
        opts = normalize_stop(opts)
        params = {
            "stopId": opts["stopId"],
            "ifModifiedSince": fallback(
                opts.get("ifModifiedSince"), DEFAULT_IF_MODIFIED_SINCE
            ),
            **self._common_params(opts),
        }
        return "/vehicles-for-stop.json", params

    async def stop(self, opts: Options = None, callback: Optional[Callback] = None) -> Any:
        """Information about a single stop."""
        return await self._dispatch(self._stop_request, opts, callback)

    def _stop_request(self, opts: Options) -> Request:
        opts = normalize_stop(opts)
        return f"/stop/{quote(str(opts['stopId']), safe='')}.json", self._common_params(opts)

    async def stops_for_location(
        self, opts: Optional[Mapping[str, Any]] = None, callback: Optional[Callback] = None
    ) -> Any:
        """Stops within ``radius`` meters of ``lat``/``lon``; all three are required."""
        return await self._dispatch(self._stops_for_location_request, opts, callback)

    def _stops_for_location_request(self, opts: Optional[Mapping[str, Any]]) -> Request:
        opts = require_fields(opts, LOCATION_REQUIRED)
        params = {
            "lat": opts["lat"],
            "lon": opts["lon"],
            "radius": opts["radius"],
            **self._common_params(opts),
        }
        return "/stops-for-location.json", params

    # ------------------------------------------------------------------
    # Route scoped endpoints
    # ------------------------------------------------------------------

    async def route(self, opts: Options = None, callback: Optional[Callback] = None) -> Any:
        """Information about a single route."""
        return await self._dispatch(self._route_request, opts, callback)

    def _route_request(self, opts: Options) -> Request:
        opts = normalize_route(opts)
        return f"/route/{quote(str(opts['routeId']), safe='')}.json", self._common_params(opts)

    async def route_details(
        self, opts: Options = None, callback: Optional[Callback] = None
    ) -> Any:
        """Detailed route information; ``related`` (default false) adds related data."""
        return await self._dispatch(self._route_details_request, opts, callback)

    def _route_details_request(self, opts: Options) -> Request:
        opts = normalize_route(opts)
        params = {
            "routeId": opts["routeId"],
            "related": fallback(opts.get("related"), False),
            **self._common_params(opts),
        }
        return "/route-details.json", params

    # ------------------------------------------------------------------
    # Service wide endpoints
    # ------------------------------------------------------------------

    async def search(self, opts: Options = None, callback: Optional[Callback] = None) -> Any:
        """Search stops and routes. ``opts`` is the query string or a mapping with ``query``."""
        return await self._dispatch(self._search_request, opts, callback)

    def _search_request(self, opts: Options) -> Request:
        opts = normalize_query(opts)
        params = {"query": opts["query"], **self._common_params(opts)}
        return "/search.json", params

    async def metadata(self, callback: Optional[Callback] = None) -> Any:
        """Service metadata. References are never included."""
        return await self._dispatch(
            lambda _: ("/metadata.json", self._unreferenced_params()), None, callback
        )

    async def bicycle_rental(self, callback: Optional[Callback] = None) -> Any:
        """Status of the public bicycle rental stations. References are never included."""
        return await self._dispatch(
            lambda _: ("/bicycle-rental.json", self._unreferenced_params()), None, callback
        )

    async def alert_search(
        self,
        opts: Union[Options, Callback] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """Service alerts, optionally limited to those affecting ``query`` (a stop id).

        ``alert_search(callback)`` is accepted as a shorthand for
        ``alert_search(None, callback)``.
        """
        if callable(opts) and callback is None:
            opts, callback = None, opts
        return await self._dispatch(self._alert_search_request, opts, callback)

    def _alert_search_request(self, opts: Options) -> Request:
        if isinstance(opts, str):
            opts = {"query": opts}
        elif opts is not None and not isinstance(opts, Mapping):
            raise InvalidArgumentError("query must be a string or a mapping", field="query")
        opts = dict(opts or {})
        params = {"query": fallback(opts.get("query"), ""), **self._common_params(opts)}
        return "/alert-search.json", params

    async def plan_trip(
        self, opts: Optional[Mapping[str, Any]] = None, callback: Optional[Callback] = None
    ) -> Any:
        """Plan a trip between two coordinates.

        Args:
            opts: Mapping with the required ``fromLat``, ``fromLon``,
                ``toLat``, ``toLon`` and any of:

                - ``fromName`` / ``toName``: place names shown in the itineraries
                - ``dateTime``: departure (or arrival, see ``arriveBy``) time as a
                  ``datetime``, ISO 8601 string or epoch milliseconds
                - ``arriveBy`` (false), ``maxTransfers`` (5),
                  ``numItineraries`` (10), ``maxWalkDistance`` (3000 m),
                  ``wheelchair`` (false), ``ignoreRealtimeUpdates`` (false),
                  ``showIntermediateStops`` (true)
                - ``optimize``: QUICK, TRANSFERS, WALK or TRIANGLE (QUICK)
                - ``mode``: comma separated string or list of modes
                - ``triangleSafetyFactor`` (1), ``triangleTimeFactor`` (0),
                  ``triangleSlopeFactor`` (0): only sent for TRIANGLE
            callback: Optional ``(error, data)`` callback

        Returns:
            The ``data`` field of the service response (itineraries)
        """
        return await self._dispatch(self._plan_trip_request, opts, callback)

    def _plan_trip_request(self, opts: Optional[Mapping[str, Any]]) -> Request:
        opts = require_fields(opts, PLAN_TRIP_REQUIRED)
        optimize = opts.get("optimize")
        if optimize and optimize not in OPTIMIZE_CHOICES:
            self.logger.warning("Unknown optimize value passed through: %s", optimize)

        params = {
            "fromPlace": format_place(opts["fromLat"], opts["fromLon"], opts.get("fromName")),
            "toPlace": format_place(opts["toLat"], opts["toLon"], opts.get("toName")),
            "maxTransfers": fallback(opts.get("maxTransfers"), DEFAULT_MAX_TRANSFERS),
            "numItineraries": fallback(opts.get("numItineraries"), DEFAULT_NUM_ITINERARIES),
            "showIntermediateStops": fallback(opts.get("showIntermediateStops"), True),
            "arriveBy": fallback(opts.get("arriveBy"), False),
            "maxWalkDistance": fallback(opts.get("maxWalkDistance"), DEFAULT_MAX_WALK_DISTANCE),
            "wheelchair": fallback(opts.get("wheelchair"), False),
            "ignoreRealtimeUpdates": fallback(opts.get("ignoreRealtimeUpdates"), False),
            "optimize": fallback(optimize, DEFAULT_OPTIMIZE),
            "mode": join_modes(fallback(opts.get("mode"), DEFAULT_MODES)),
            **self._common_params(opts),
        }

        if opts.get("dateTime"):
            params["date"], params["time"] = split_date_time(opts["dateTime"], self._tz)

        if optimize == "TRIANGLE":
            for name, default in TRIANGLE_DEFAULTS.items():
                params[name] = fallback(opts.get(name), default)

        return "/plan-trip.json", params

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def send_request(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        """Send one GET request and unwrap the ``{code, text, data}`` envelope.

        Args:
            endpoint: Endpoint path relative to the base URL
            params: Query parameters

        Returns:
            The envelope's ``data`` field, unmodified

        Raises:
            ServiceError: If the envelope code is not 200
            httpx.HTTPError: If the HTTP call itself fails
            ValueError: If the body is not JSON
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        start_time = time.time()

        try:
            response = await self._get(url, params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_api_call(
                self.logger,
                endpoint,
                (time.time() - start_time) * 1000,
                status_code=e.response.status_code,
                error_code="HTTP_ERROR",
            )
            raise
        except httpx.HTTPError:
            log_api_call(
                self.logger, endpoint, (time.time() - start_time) * 1000, error_code="NETWORK_ERROR"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        try:
            payload = response.json()
        except ValueError:
            log_api_call(
                self.logger,
                endpoint,
                duration_ms,
                status_code=response.status_code,
                error_code="INVALID_JSON",
            )
            raise

        if not isinstance(payload, dict):
            log_api_call(
                self.logger,
                endpoint,
                duration_ms,
                status_code=response.status_code,
                error_code="INVALID_ENVELOPE",
            )
            raise ServiceError("Unexpected response format from FUTÁR API")

        code = payload.get("code")
        if code != 200:
            log_api_call(
                self.logger,
                endpoint,
                duration_ms,
                status_code=response.status_code,
                envelope_code=code,
                error_code="SERVICE_ERROR",
            )
            raise ServiceError(payload.get("text") or f"Request failed with code {code}", code=code)

        log_api_call(
            self.logger, endpoint, duration_ms, status_code=response.status_code, envelope_code=code
        )
        return payload.get("data")

    async def _get(self, url: str, params: Mapping[str, Any]) -> httpx.Response:
        headers = {"Accept": "application/json", "User-Agent": self._settings.user_agent}

        if self._http_client is not None:
            return await self._http_client.get(url, params=params, headers=headers)

        async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
            return await client.get(url, params=params)

    async def _dispatch(
        self,
        build: Callable[[Any], Request],
        opts: Any,
        callback: Optional[Callback],
    ) -> Any:
        """Build the request, send it and report the outcome to ``callback`` once.

        Validation errors are raised here too, so awaiting callers handle them
        the same way as failed requests.
        """
        try:
            endpoint, params = build(opts)
            data = await self.send_request(endpoint, params)
        except Exception as exc:
            if callback is not None:
                try:
                    await _maybe_await(callback(exc))
                except Exception:
                    self.logger.exception(
                        "Callback raised while reporting %s", type(exc).__name__
                    )
            raise

        if callback is not None:
            await _maybe_await(callback(None, data))
        return data

    # ------------------------------------------------------------------
    # Parameter defaults
    # ------------------------------------------------------------------

    def _include_references(self, opts: Mapping[str, Any]) -> Any:
        return fallback(opts.get("includeReferences"), self.config.include_references)

    def _common_params(self, opts: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "includeReferences": self._include_references(opts),
            "version": fallback(opts.get("version"), self.config.api_version),
        }

    def _unreferenced_params(self) -> Dict[str, Any]:
        return {"includeReferences": False, "version": self.config.api_version}


async def _maybe_await(result: Union[Any, Awaitable[Any]]) -> None:
    if inspect.isawaitable(result):
        await result

# ruralnav/services/route_requesters.py
import logging
import queue
import threading
from dataclasses import dataclass, field

from ruralnav.app.protocols import RouteRequester
from ruralnav.domain.entities.geography import Coordinate, Route, RoutingPreferences
from ruralnav.runtime.types import RouteSource, TransportMode
from ruralnav.services.route_acquisition import RouteAcquisition

log = logging.getLogger("ruralnav.routing")


@dataclass(frozen=True)
class RouteRequest:
    request_id: int
    start: Coordinate
    end: Coordinate
    mode: TransportMode
    prefs: RoutingPreferences
    waypoints: tuple[Coordinate, ...] = field(default=())
    online: bool = True


class _Outbox:
    """Keeps only the newest finished route; older results are superseded."""

    def __init__(self):
        self._lock = threading.Lock()
        self._latest: tuple[int, Route] | None = None

    def put(self, request_id: int, route: Route) -> None:
        with self._lock:
            if self._latest is None or request_id >= self._latest[0]:
                self._latest = (request_id, route)

    def take(self) -> tuple[int, Route] | None:
        with self._lock:
            out, self._latest = self._latest, None
            return out


class InlineRouteRequester(RouteRequester):
    """Acquires at submit time. Deterministic; used by tests and offline runs."""

    def __init__(self, acquisition: RouteAcquisition):
        self.acquisition = acquisition
        self._outbox = _Outbox()

    def submit(self, request_id, start, end, *, mode, prefs, waypoints=(), online=True):
        route = self.acquisition.acquire(start, end, mode, prefs, waypoints, online=online)
        self._outbox.put(request_id, route)

    def poll(self):
        return self._outbox.take()

    def close(self):
        pass


class ThreadedRouteRequester(RouteRequester):
    """
    Acquires on a daemon worker so a slow network never stalls the tick loop.
    The request queue is bounded; on overflow the oldest pending request is dropped.
    """

    def __init__(self, acquisition: RouteAcquisition, maxsize: int = 8):
        self.acquisition = acquisition
        self.q: queue.Queue[RouteRequest | None] = queue.Queue(maxsize=maxsize)
        self._outbox = _Outbox()
        self._stop = False
        self.dropped = 0
        self._t = threading.Thread(target=self._run, name="route-requester", daemon=True)
        self._t.start()

    def submit(self, request_id, start, end, *, mode, prefs, waypoints=(), online=True):
        req = RouteRequest(request_id, start, end, mode, prefs, tuple(waypoints), online)
        while True:
            try:
                self.q.put_nowait(req)
                return
            except queue.Full:
                try:
                    self.q.get_nowait()  # superseded anyway
                    self.dropped += 1
                except queue.Empty:
                    pass

    def poll(self):
        return self._outbox.take()

    def _run(self):
        while not self._stop:
            req = self.q.get()
            if req is None:
                break
            try:
                route = self.acquisition.acquire(
                    req.start, req.end, req.mode, req.prefs, req.waypoints, online=req.online
                )
            except Exception:
                # the worker must outlive a broken router; fall back to straight legs
                log.exception(
                    "route_acquisition_failed", extra={"extra": {"request_id": req.request_id}}
                )
                route = Route((req.start, *req.waypoints, req.end), RouteSource.DIRECT)
            self._outbox.put(req.request_id, route)

    def close(self):
        self._stop = True
        try:
            self.q.put_nowait(None)
        except queue.Full:
            pass
        self._t.join(timeout=1.0)

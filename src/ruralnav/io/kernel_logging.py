# ruralnav/io/kernel_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from enum import Enum

from ruralnav.io.recorder import Recorder
from ruralnav.sim.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_jsonable)


def _jsonable(o):
    if isinstance(o, Enum):
        return o.value
    if is_dataclass(o):
        return asdict(o)
    return str(o)


def configure_logging(name="ruralnav", level="INFO", stream=None) -> logging.Logger:
    """Attach a JSON stdout handler to the package logger once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class KernelLogging(NoopHooks):
    """
    One place to shape and emit structured logs for kernel dispatch, navigation
    snapshots and business events.
    """

    COMMANDS = {
        "DestinationRequested",
        "WaypointAdded",
        "WaypointsCleared",
        "PreferencesChanged",
        "TransportModeChanged",
        "GpsStatusChanged",
        "ConnectivityChanged",
        "NavigationStopped",
        "TrackCommand",
    }

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 60,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.clock, self.debug = run_id, clock, debug
        self.sample_every = max(1, sample_every)
        self.recorder = recorder
        if logger is not None:
            logger.setLevel(level)
        self.log = logger or configure_logging(level=level)
        self._snapshots = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        if self.clock and extra.get("t") is not None:
            payload["wall"] = self.clock.to_wall(extra["t"]).isoformat()
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    @staticmethod
    def _shape_event(ev) -> dict:
        base = {"t": getattr(ev, "t", None)}
        if is_dataclass(ev):
            data = asdict(ev)
            data.pop("t", None)
            if data:
                base["data"] = data
        return base

    # --------------- Kernel lifecycle --------------------

    def run_start(self, *, until: float | None, max_events: int | None, qsize: int | None):
        self._emit("INFO", "run_start", until=until, max_events=max_events, qsize=qsize)

    def run_end(self, *, processed: int, **extra):
        self._emit("INFO", "run_end", processed=processed, **extra)

    def dispatch_start(self, ev, *, seq: int, qsize: int, handlers: int):
        name = type(ev).__name__
        level = "INFO" if name in self.COMMANDS else ("DEBUG" if self.debug else None)
        if level:
            self._emit(level, name, **self._shape_event(ev), seq=seq, handlers=handlers)

    def error(self, ev, *, reason: str, **extra):
        self._emit("ERROR", "kernel_error", event=type(ev).__name__, reason=reason, **extra)

    # --------------- Navigation outputs ------------------

    def snapshot(self, snap):
        self._snapshots += 1
        if (self._snapshots - 1) % self.sample_every:
            return
        m, eta = snap.maneuver, snap.eta
        arrive_at = self.clock.clock_text(snap.t + eta.duration_s) if (eta and self.clock) else None
        self._emit(
            "INFO",
            "snapshot",
            t=snap.t,
            lat=round(snap.position.lat, 7),
            lon=round(snap.position.lon, 7),
            heading=round(snap.heading_deg, 1),
            speed=round(snap.speed_mps, 2),
            mode=snap.motion_mode,
            maneuver=m.kind if m else None,
            maneuver_m=round(m.distance_m, 1) if m else None,
            eta=eta.duration_text if eta else None,
            arrive_at=arrive_at,
            signal=snap.signal_strength,
        )

    def biz(self, ev):
        self._emit("INFO", ev.name, **self._shape_event(ev))
        if self.recorder:
            self.recorder.emit(ev)

# ruralnav/io/recorder.py
import json
import logging
import queue
import sys
import threading
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger("ruralnav.recorder")


class Sink(Protocol):
    def write(self, ev) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev) -> None:
        self.fp.write(json.dumps(asdict(ev), default=str) + "\n")


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)

    def named(self, name: str) -> list:
        return [e for e in self.events if getattr(e, "name", None) == name]


# Async sink (non-blocking, drops on overflow)
class AsyncSink:
    def __init__(self, sink: Sink, maxsize: int = 10000):
        self.sink, self.q = sink, queue.Queue(maxsize=maxsize)
        self.dropped = 0
        self._t = threading.Thread(target=self._run, daemon=True)
        self._t.start()

    def write(self, ev) -> None:
        try:
            self.q.put_nowait(ev)
        except queue.Full:
            self.dropped += 1  # never block the tick loop

    def _run(self):
        while True:
            ev = self.q.get()
            if ev is None:
                break
            try:
                self.sink.write(ev)
            except (OSError, TypeError, ValueError):
                log.exception("async sink write failed")

    def stop(self):
        try:
            self.q.put_nowait(None)
        except queue.Full:
            pass
        self._t.join(timeout=1.0)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    @classmethod
    def buffered(cls, *sinks: Sink, maxsize: int = 10000) -> "Recorder":
        return cls(*(AsyncSink(s, maxsize) for s in (sinks or (JsonlSink(),))))

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError):
                # analytics must never break navigation
                log.exception("recorder sink %s failed", type(s).__name__)

    def close(self) -> None:
        for s in self.sinks:
            if isinstance(s, AsyncSink):
                s.stop()

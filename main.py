# main.py
import argparse

from ruralnav.app.build import build
from ruralnav.app.events import DestinationRequested, TrackCommand
from ruralnav.config.models import ScenarioModel
from ruralnav.domain.entities.geography import Coordinate
from ruralnav.io.config import load_scenario


def _latlon(text: str) -> Coordinate:
    lat, lon = (float(x) for x in text.split(","))
    return Coordinate(lat, lon)


def run(model: ScenarioModel, destination: Coordinate, waypoints: list[Coordinate]):
    app = build(model)
    k = app.kernel

    k.schedule(TrackCommand(t=0.0, action="start"))
    k.schedule(DestinationRequested(t=0.0, destination=destination, waypoints=tuple(waypoints)))
    app.start()
    try:
        k.run(until=model.sim.duration)
    finally:
        app.close()
    return app


def main(argv=None):
    p = argparse.ArgumentParser(description="Simulate a navigation session.")
    p.add_argument("--config", help="JSON scenario file")
    p.add_argument("--dest", type=_latlon, default=_latlon("26.9200,75.7950"), help="lat,lon")
    p.add_argument("--via", type=_latlon, action="append", default=[], help="lat,lon (repeatable)")
    p.add_argument("--mode", choices=["walk", "bike", "car"])
    p.add_argument("--offline", action="store_true", help="never ask the online router")
    p.add_argument("--duration", type=float, help="simulated seconds")
    args = p.parse_args(argv)

    model = load_scenario(args.config) if args.config else ScenarioModel()
    data = model.model_dump(mode="json")
    if args.mode:
        data["vehicle"]["mode"] = args.mode
    if args.offline:
        data["routing"]["remote"] = {"kind": "disabled"}
    if args.duration:
        data["sim"]["duration"] = args.duration
    # overrides go through the same validation as the file
    model = ScenarioModel.model_validate(data)

    app = run(model, args.dest, args.via)
    s = app.state
    print(
        f"state={s.nav_state.value} at {s.vehicle.position.lat:.6f},{s.vehicle.position.lon:.6f} "
        f"track={len(app.navigation.track.points)} pts"
    )


if __name__ == "__main__":
    main()

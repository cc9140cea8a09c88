# ruralnav/domain/mechanics/mechanics_factory.py

from ruralnav.config.models import NavigationModel, PlannerUnion
from ruralnav.domain.mechanics.mechanics_core import Mechanics
from ruralnav.domain.mechanics.mechanics_maneuvers import ManeuverDetector
from ruralnav.runtime.registries import make_planner


def build_mechanics(
    planner_cfg: PlannerUnion, nav_cfg: NavigationModel, *, graph=None
) -> Mechanics:
    planner = make_planner(planner_cfg, deps={"graph": graph} if graph is not None else {})
    maneuvers = ManeuverDetector(
        arrival_m=nav_cfg.arrival_m,
        turn_threshold_deg=nav_cfg.turn_threshold_deg,
        max_lookahead_m=nav_cfg.max_lookahead_m,
    )
    return Mechanics(planner=planner, maneuvers=maneuvers)

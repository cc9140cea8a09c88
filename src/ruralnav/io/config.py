# src/ruralnav/io/config.py
import json
from pathlib import Path

from ruralnav.config.models import ScenarioModel


def load_scenario(path: str | Path) -> ScenarioModel:
    """Read a JSON scenario file. Raises pydantic.ValidationError on bad fields."""
    with open(path, encoding="utf-8") as f:
        return ScenarioModel.model_validate(json.load(f))

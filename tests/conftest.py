import json
from pathlib import Path

import pytest

from data_prep import load_scenario

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_scenario_dict() -> dict:
    return json.loads((DATA_DIR / "sample_scenario.json").read_text(encoding="utf-8"))


@pytest.fixture
def sample_scenario(sample_scenario_dict):
    return load_scenario(sample_scenario_dict)

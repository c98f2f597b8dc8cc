import pandas as pd
import pytest

from stormdmg.models import StormEvent
from stormdmg.normalize import normalize_events

COLUMNS = ["STATE__", "REFNUM", "EVTYPE", "FATALITIES", "INJURIES",
           "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP", "REMARKS"]


def make_event(ref, event_type, fatalities=0, injuries=0, prop=0.0, prop_exp="", crop=0.0, crop_exp=""):
    return StormEvent(ref, event_type, fatalities, injuries, prop, prop_exp, crop, crop_exp)


@pytest.fixture
def scenario_events():
    return [
        make_event(1, "TORNADO", 5, 10, 2.5, "K", 0, ""),
        make_event(2, "TORNADO", 3, 0, 1, "M", 0, ""),
        make_event(3, "FLOOD", 0, 2, 0, "", 4, "B"),
    ]


@pytest.fixture
def scenario_normalized(scenario_events):
    return normalize_events(scenario_events)


@pytest.fixture
def scenario_df():
    return pd.DataFrame(
        [
            [1.0, 1, "TORNADO", 5.0, 10.0, 2.5, "K", 0.0, "", "first"],
            [1.0, 2, "TORNADO", 3.0, 0.0, 1.0, "M", 0.0, "", ""],
            [2.0, 3, "FLOOD", 0.0, 2.0, 0.0, "", 4.0, "B", "crops lost"],
        ],
        columns=COLUMNS,
    )


@pytest.fixture
def scenario_csv(tmp_path, scenario_df):
    path = tmp_path / "StormData.csv"
    scenario_df.to_csv(path, index=False)
    return path

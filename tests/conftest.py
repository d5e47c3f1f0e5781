"""Shared fixtures for the QAP scorer test suite.

Payloads mirror the scoring service's wire format, including the
positional community transportation block.
"""

import copy

import pytest

from qap_scorer.models import ScoreResult

SAMPLE_PAYLOAD = {
    "scored_activity_table": [
        {
            "qapDesirableActivity": "Grocery Store",
            "name": "Kroger",
            "miles_away": 0.4,
            "points": 3,
            "site_latitude": 33.75,
            "site_longitude": -84.39,
        },
        {
            "qapDesirableActivity": "Public School",
            "name": "Grady High School",
            "miles_away": 1.2,
            "points": 2,
            "site_latitude": 33.78,
            "site_longitude": -84.37,
        },
        {
            "qapDesirableActivity": "Hospital",
            "name": None,
            "miles_away": None,
            "points": 0,
            "site_latitude": None,
            "site_longitude": None,
        },
    ],
    "desirable_activity_total_points": 25,
    "scored_community_transportation": [
        [
            {
                "community_transportation_total_points": 4,
                "community_transportation_a_points": 3,
                "community_transportation_b_points": 1,
            }
        ],
        [{"name": "Five Points Station", "miles_away": 0.3}],
        [{"name": None, "miles_away": None}],
    ],
    "scored_previous_projects": [
        {
            "jurisdiction_name": "Atlanta",
            "most_recent_year": 2019,
            "previous_project_total_points": 8,
            "previous_project_a_points": 3,
            "previous_project_b_points": 5,
            "b_no_awards_1mi_since": 2,
        },
        {
            "jurisdiction_name": None,
            "most_recent_year": None,
            "previous_project_total_points": 3,
            "previous_project_a_points": 3,
            "previous_project_b_points": 0,
            "b_no_awards_1mi_since": None,
        },
    ],
    "total_points": 35,
}


@pytest.fixture()
def payload():
    """A fresh, mutable copy of the sample service response."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture()
def score_result(payload):
    return ScoreResult.from_payload(payload)

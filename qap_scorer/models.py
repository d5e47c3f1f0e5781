"""
Data model for QAP site scoring results and map annotations
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Coordinate:
    """A selected site location"""
    latitude: float
    longitude: float

    def as_latlng(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class ScoreRequest:
    """One scoring query, built fresh for every selection"""
    coordinate: Coordinate
    application_year: int

    def to_params(self, api_key: str) -> Dict[str, Any]:
        return {
            "site_latitude": self.coordinate.latitude,
            "site_longitude": self.coordinate.longitude,
            "application_year": self.application_year,
            "api_key": api_key,
        }


@dataclass(frozen=True)
class Activity:
    """A contributing location for one desirable-activity category"""
    category: str
    name: Optional[str]
    miles_away: Optional[float]
    points: float
    location: Optional[Coordinate]  # None when nothing qualified nearby


@dataclass(frozen=True)
class TransitContributor:
    """Named site behind a community transportation sub-score"""
    name: Optional[str]
    miles_away: Optional[float]


@dataclass(frozen=True)
class CommunityTransportationPoints:
    total_points: float
    a_points: float
    b_points: float


@dataclass(frozen=True)
class CommunityTransportation:
    """Named view of the service's positional transportation block"""
    points: CommunityTransportationPoints
    transit_oriented_development: TransitContributor
    public_transportation_access: TransitContributor


@dataclass(frozen=True)
class PreviousProjectRecord:
    jurisdiction_name: Optional[str]
    most_recent_year: Optional[int]
    total_points: float
    points_a: float
    points_b: float
    years_since_nearby_award: Optional[int]


@dataclass(frozen=True)
class ScoreResult:
    """Complete scoring service response for a single site"""
    activities: Tuple[Activity, ...]
    desirable_activity_total_points: float
    community_transportation: CommunityTransportation
    previous_projects: Tuple[PreviousProjectRecord, ...]
    total_points: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ScoreResult":
        """
        Decode a scoring service response body

        Args:
            payload: Parsed JSON body returned by the service

        Returns:
            ScoreResult with named fields

        Raises:
            ValueError: If an expected field is missing or has the wrong shape
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

        try:
            activities = tuple(
                _parse_activity(row) for row in _require_list(payload, "scored_activity_table")
            )
            transportation = _parse_transportation(
                _require_list(payload, "scored_community_transportation")
            )
            previous = tuple(
                _parse_previous_project(row)
                for row in _require_list(payload, "scored_previous_projects")
            )
            return cls(
                activities=activities,
                desirable_activity_total_points=_number(payload, "desirable_activity_total_points"),
                community_transportation=transportation,
                previous_projects=previous,
                total_points=_number(payload, "total_points"),
            )
        except (KeyError, TypeError, IndexError, AttributeError) as e:
            raise ValueError(f"Malformed score payload: {e!r}") from e


@dataclass(frozen=True)
class Marker:
    """A labelled point to plot on the map"""
    location: Coordinate
    label: str


def _require_list(obj: Dict[str, Any], key: str) -> List[Any]:
    value = obj[key]
    if not isinstance(value, list):
        raise ValueError(f"Field '{key}' must be a list")
    return value


def _number(obj: Dict[str, Any], key: str) -> float:
    value = obj[key]
    # bool is an int subclass; the service never sends one for points
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Field '{key}' must be finite, got {value!r}")
    return value


def _optional_number(obj: Dict[str, Any], key: str) -> Optional[float]:
    value = obj.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Field '{key}' must be finite, got {value!r}")
    return value


def _optional_name(obj: Dict[str, Any], key: str = "name") -> Optional[str]:
    value = obj.get(key)
    return value if value else None


def _parse_activity(row: Dict[str, Any]) -> Activity:
    lat = _optional_number(row, "site_latitude")
    lng = _optional_number(row, "site_longitude")
    location = Coordinate(lat, lng) if lat is not None and lng is not None else None
    return Activity(
        category=row["qapDesirableActivity"],
        name=_optional_name(row),
        miles_away=_optional_number(row, "miles_away"),
        points=_number(row, "points"),
        location=location,
    )


def _single(block: Any, position: int) -> Dict[str, Any]:
    # each entry of the transportation block is wrapped in a one-element list
    if not isinstance(block, list) or not block or not isinstance(block[0], dict):
        raise ValueError(
            f"scored_community_transportation[{position}] must be a one-element list of objects"
        )
    return block[0]


def _parse_transportation(blocks: List[Any]) -> CommunityTransportation:
    if len(blocks) != 3:
        raise ValueError(
            f"scored_community_transportation must have 3 entries, got {len(blocks)}"
        )
    aggregate, tod, access = (_single(b, i) for i, b in enumerate(blocks))
    return CommunityTransportation(
        points=CommunityTransportationPoints(
            total_points=_number(aggregate, "community_transportation_total_points"),
            a_points=_number(aggregate, "community_transportation_a_points"),
            b_points=_number(aggregate, "community_transportation_b_points"),
        ),
        transit_oriented_development=TransitContributor(
            name=_optional_name(tod), miles_away=_optional_number(tod, "miles_away")
        ),
        public_transportation_access=TransitContributor(
            name=_optional_name(access), miles_away=_optional_number(access, "miles_away")
        ),
    )


def _parse_previous_project(row: Dict[str, Any]) -> PreviousProjectRecord:
    year = _optional_number(row, "most_recent_year")
    since = _optional_number(row, "b_no_awards_1mi_since")
    return PreviousProjectRecord(
        jurisdiction_name=_optional_name(row, "jurisdiction_name"),
        most_recent_year=int(year) if year is not None else None,
        total_points=_number(row, "previous_project_total_points"),
        points_a=_number(row, "previous_project_a_points"),
        points_b=_number(row, "previous_project_b_points"),
        years_since_nearby_award=int(since) if since is not None else None,
    )

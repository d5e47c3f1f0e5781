"""
Presentation model for a site's QAP score breakdown
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .models import Activity, PreviousProjectRecord, ScoreResult, TransitContributor

DESIRABLE_ACTIVITY_CAP = 20
EXPLAINER_URL = (
    "https://receptive-muenster-7fe.notion.site/"
    "QAP-Mapper-2d274826428549879f6b29a4b7a82c9c?pvs=25"
)
MISSING_ACTIVITY_TEXT = "none within 1.5 miles"


class Band(str, Enum):
    """Row highlight for an activity, by distance to the site"""
    MISSING = "missing"
    FAR = "far"
    CLOSER = "closer"
    CLOSEST = "closest"

    @property
    def color(self) -> str:
        return BAND_COLORS[self]


BAND_COLORS = {
    Band.MISSING: "#f8d7da",
    Band.FAR: "#fff3cd",
    Band.CLOSER: "#d1ecf1",
    Band.CLOSEST: "#d4edda",
}


def classify_activity(activity: Activity) -> Band:
    """First match wins: missing, far (> 1 mi), closer (> 0.5 mi), closest"""
    if not activity.name:
        return Band.MISSING
    miles = activity.miles_away
    if miles is not None and miles > 1:
        return Band.FAR
    if miles is not None and miles > 0.5:
        return Band.CLOSER
    return Band.CLOSEST


def format_number(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class ActivityRow:
    category: str
    name_text: str
    miles_away: str
    points: str
    band: Band


@dataclass(frozen=True)
class DesirableActivitySection:
    raw_total: float
    capped: bool
    heading: str
    rows: Tuple[ActivityRow, ...]


@dataclass(frozen=True)
class TransportationSection:
    heading: str
    tod_heading: str
    tod_line: Optional[str]
    access_heading: str
    access_line: Optional[str]


@dataclass(frozen=True)
class PreviousProjectSection:
    heading: str
    jurisdiction_heading: str
    jurisdiction_line: str
    nearby_heading: str
    nearby_line: Optional[str]
    transit_hub_line: Optional[str]


@dataclass(frozen=True)
class PresentationModel:
    pending: bool
    headline: str
    desirable_activities: Optional[DesirableActivitySection] = None
    transportation: Optional[TransportationSection] = None
    previous_projects: Tuple[PreviousProjectSection, ...] = ()
    explainer_url: str = EXPLAINER_URL


PENDING = PresentationModel(pending=True, headline="Scoring...")


class ScoreBreakdownView:
    """Turns a ScoreResult into a renderable PresentationModel. Stateless."""

    def present(self, result: Optional[ScoreResult]) -> PresentationModel:
        if result is None:
            return PENDING
        return PresentationModel(
            pending=False,
            headline=f"{format_number(result.total_points)} points",
            desirable_activities=self._desirable_activities(result),
            transportation=self._transportation(result),
            previous_projects=tuple(
                self._previous_project(p) for p in result.previous_projects
            ),
        )

    def _desirable_activities(self, result: ScoreResult) -> DesirableActivitySection:
        total = result.desirable_activity_total_points
        capped = total > DESIRABLE_ACTIVITY_CAP
        if capped:
            summary = f"Maximum Points: ({format_number(total)} / {DESIRABLE_ACTIVITY_CAP})"
        else:
            summary = f"{format_number(total)} points"
        rows = tuple(
            ActivityRow(
                category=a.category,
                name_text=a.name if a.name else MISSING_ACTIVITY_TEXT,
                miles_away=format_number(a.miles_away),
                points=format_number(a.points),
                band=classify_activity(a),
            )
            for a in result.activities
        )
        return DesirableActivitySection(
            raw_total=total,
            capped=capped,
            heading=f"Desirable Activities: {summary}",
            rows=rows,
        )

    def _transportation(self, result: ScoreResult) -> TransportationSection:
        ct = result.community_transportation
        return TransportationSection(
            heading=f"Community Transportation Options: {format_number(ct.points.total_points)} points",
            tod_heading=f"(A) Transit-Oriented Development: {format_number(ct.points.a_points)} points",
            tod_line=_walking_line(ct.transit_oriented_development),
            access_heading=f"(B) Access to Public Transportation: {format_number(ct.points.b_points)} points",
            access_line=_walking_line(ct.public_transportation_access),
        )

    def _previous_project(self, project: PreviousProjectRecord) -> PreviousProjectSection:
        if project.jurisdiction_name:
            jurisdiction = (
                f"Last project in {project.jurisdiction_name}: "
                f"{format_number(project.most_recent_year)}"
            )
        else:
            jurisdiction = "Unincorporated jurisdiction"

        # zero points here means a disqualifying recent award, not missing data
        nearby = None
        if project.points_b > 0:
            nearby = (
                "Last award within a mile: "
                f"{format_number(project.years_since_nearby_award)} years ago"
            )
        elif project.points_b == 0:
            nearby = "Last award within a mile: within last 2 years"

        transit_hub = None
        if (
            project.points_b > 0
            and project.years_since_nearby_award is not None
            and project.years_since_nearby_award <= 3
        ):
            transit_hub = "Transit hub within 1 mile walk"

        return PreviousProjectSection(
            heading=f"Previous Projects: {format_number(project.total_points)} points",
            jurisdiction_heading=f"(A) Awards in Jurisdiction: {format_number(project.points_a)} points",
            jurisdiction_line=jurisdiction,
            nearby_heading=f"(B) Awards within a Mile: {format_number(project.points_b)} points",
            nearby_line=nearby,
            transit_hub_line=transit_hub,
        )


def _walking_line(contributor: TransitContributor) -> Optional[str]:
    if not contributor.name:
        return None
    return f"{contributor.name}: {format_number(contributor.miles_away)} miles away (walking)"

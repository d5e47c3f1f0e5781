"""
Selection state machine: coordinate -> score request -> markers and breakdown.

States run IDLE -> SCORING -> SCORED | FAILED and re-enter SCORING on every
new selection. Each selection gets a ticket number; a response carrying an
older ticket is stale and is dropped, even if the coordinate is the same.
A failure never clears the markers or breakdown of the last good result.
"""

import logging
from enum import Enum
from typing import Optional

from .breakdown import PresentationModel, ScoreBreakdownView
from .map_annotator import MapAnnotator, MarkerLayer
from .models import Coordinate, ScoreRequest, ScoreResult
from .score_client import ScoreClient, ScoringError, TransportFailure

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    IDLE = "idle"
    SCORING = "scoring"
    SCORED = "scored"
    FAILED = "failed"


class StaleResponse(Exception):
    """Raised internally when a response belongs to a superseded selection."""

    pass


class SelectionController:
    def __init__(
        self,
        client: ScoreClient,
        annotator: MapAnnotator,
        view: ScoreBreakdownView,
        layer: MarkerLayer,
        max_transport_retries: int = 0,
    ):
        self.client = client
        self.annotator = annotator
        self.view = view
        self.layer = layer
        self.max_transport_retries = max_transport_retries

        self.state = SelectionState.IDLE
        self.coordinate: Optional[Coordinate] = None
        self.scored_coordinate: Optional[Coordinate] = None
        self.result: Optional[ScoreResult] = None
        self.last_error: Optional[ScoringError] = None
        self._ticket = 0
        self._presentation = view.present(None)

    @property
    def current_ticket(self) -> int:
        return self._ticket

    @property
    def presentation(self) -> PresentationModel:
        return self._presentation

    def select(self, coordinate: Coordinate) -> int:
        """Start scoring a new coordinate, superseding any request in flight"""
        self._ticket += 1
        self.coordinate = coordinate
        self.state = SelectionState.SCORING
        self.last_error = None
        logger.info(
            "Selection #%d at %.6f, %.6f", self._ticket, coordinate.latitude, coordinate.longitude
        )
        return self._ticket

    def _check_current(self, ticket: int) -> None:
        if ticket != self._ticket:
            raise StaleResponse(f"ticket {ticket} superseded by {self._ticket}")

    def complete(self, ticket: int, result: ScoreResult) -> bool:
        """Apply a successful response; returns False if it was stale"""
        try:
            self._check_current(ticket)
        except StaleResponse as e:
            logger.debug("Discarding stale score response: %s", e)
            return False

        self.result = result
        self.scored_coordinate = self.coordinate
        self.state = SelectionState.SCORED
        self.annotator.render(result, self.layer)
        self._presentation = self.view.present(result)
        logger.info("Selection #%d scored %s points", ticket, result.total_points)
        return True

    def fail(self, ticket: int, error: ScoringError) -> bool:
        """Record a failed response; markers and breakdown are left as they were"""
        try:
            self._check_current(ticket)
        except StaleResponse as e:
            logger.debug("Discarding stale score failure: %s", e)
            return False

        self.state = SelectionState.FAILED
        self.last_error = error
        logger.warning("Selection #%d failed: %s", ticket, error)
        return True

    def score(self, coordinate: Coordinate, application_year: int) -> SelectionState:
        """Select a coordinate and fetch its score synchronously"""
        ticket = self.select(coordinate)
        request = ScoreRequest(coordinate=coordinate, application_year=application_year)

        attempt = 0
        while True:
            try:
                result = self.client.fetch_score(request)
            except TransportFailure as e:
                if attempt < self.max_transport_retries:
                    attempt += 1
                    logger.info(
                        "Retrying selection #%d after transport failure (%d/%d)",
                        ticket, attempt, self.max_transport_retries,
                    )
                    continue
                self.fail(ticket, e)
                break
            except ScoringError as e:
                self.fail(ticket, e)
                break
            else:
                self.complete(ticket, result)
                break
        return self.state

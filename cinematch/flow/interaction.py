"""
Interaction flow for one user session: input -> loading -> results.

Each state is its own model so that, for example, a result can only exist in
the results state and a validation error only in the input state.
"""
import threading
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from cinematch.exceptions import FlowStateError, RequestFailure, ValidationFailure
from cinematch.llm.recommendation_client import RecommendationClient
from cinematch.models.preference import MoviePreference
from cinematch.models.recommendation import RecommendationResult
from cinematch.utils.logger import get_logger

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Please provide at least a genre, a favorite movie, or a mood."
REQUEST_FAILURE_MESSAGE = "Failed to get recommendations. Please try again."


class InputState(BaseModel):
    step: Literal["input"] = "input"
    preferences: MoviePreference = Field(default_factory=MoviePreference)
    error: Optional[str] = None


class LoadingState(BaseModel):
    step: Literal["loading"] = "loading"


class ResultsState(BaseModel):
    step: Literal["results"] = "results"
    result: RecommendationResult


FlowState = Annotated[Union[InputState, LoadingState, ResultsState], Field(discriminator="step")]


class InteractionFlow:
    """Owns one Preference Record and at most one Recommendation Result."""

    def __init__(self, client: RecommendationClient):
        self.client = client
        self.state: FlowState = InputState()
        self._lock = threading.Lock()

    @property
    def step(self) -> str:
        return self.state.step

    def _input_state(self, action: str) -> InputState:
        if not isinstance(self.state, InputState):
            raise FlowStateError(f"Cannot {action} while in '{self.state.step}' state")
        return self.state

    @property
    def preferences(self) -> MoviePreference:
        return self._input_state("edit preferences").preferences

    def add(self, field: str, value: str) -> None:
        with self._lock:
            self.preferences.add(field, value)

    def remove(self, field: str, value: str) -> None:
        with self._lock:
            self.preferences.remove(field, value)

    def set_scalars(
        self,
        language: Optional[str] = None,
        year_range: Optional[str] = None,
        mood: Optional[str] = None,
    ) -> None:
        with self._lock:
            prefs = self.preferences
            if language is not None:
                prefs.language = language
            if year_range is not None:
                prefs.year_range = year_range
            if mood is not None:
                prefs.mood = mood

    def submit(self) -> RecommendationResult:
        """
        Ask the oracle for recommendations.

        Raises:
            ValidationFailure: none of genres, favorite movies or mood is set.
                The flow stays in input with the message attached.
            RequestFailure: the oracle call failed. The flow returns to input
                with the preferences untouched.
            FlowStateError: the flow is not in input (e.g. a call is in flight).
        """
        with self._lock:
            state = self._input_state("submit")
            prefs = state.preferences
            if not prefs.has_core_preference():
                state.error = VALIDATION_MESSAGE
                logger.info("Submit rejected: no genre, favorite movie or mood")
                raise ValidationFailure(VALIDATION_MESSAGE)
            self.state = LoadingState()

        logger.info("Flow: input -> loading")
        try:
            result = self.client.get_recommendations(prefs)
        except Exception as e:
            # Every failure leaves loading
            self.state = InputState(preferences=prefs, error=REQUEST_FAILURE_MESSAGE)
            logger.info("Flow: loading -> input (request failed)")
            if isinstance(e, RequestFailure):
                raise
            raise RequestFailure("Recommendation request failed") from e

        self.state = ResultsState(result=result)
        logger.info("Flow: loading -> results")
        return result

    def restart(self) -> None:
        with self._lock:
            if isinstance(self.state, LoadingState):
                raise FlowStateError("Cannot restart while a request is in flight")
            self.state = InputState()
        logger.info("Flow: restarted with empty preferences")

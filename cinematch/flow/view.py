import re
from typing import List, Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cinematch.flow.interaction import InputState, InteractionFlow, ResultsState
from cinematch.models.preference import MoviePreference
from cinematch.models.recommendation import RecommendationResult

DEFAULT_COVER_URL = "https://picsum.photos/seed/{seed}/400/600"
NOT_SPECIFIED = "Not specified"


class ViewModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryItem(ViewModel):
    label: str
    value: str


class MovieCard(ViewModel):
    title: str
    year: str
    genre: str
    why_recommended: str
    similar_to: str
    cover_url: str


class ResultsView(ViewModel):
    summary: List[SummaryItem]
    count_label: str
    cards: List[MovieCard]


class FlowView(ViewModel):
    step: Literal["input", "loading", "results"]
    preferences: Optional[MoviePreference] = None
    error: Optional[str] = None
    results: Optional[ResultsView] = None


def cover_url(title: str, template: str = DEFAULT_COVER_URL) -> str:
    seed = re.sub(r"\s+", "", title)
    return template.format(seed=quote(seed, safe=""))


def render_results(result: RecommendationResult, cover_template: str = DEFAULT_COVER_URL) -> ResultsView:
    summary = [
        SummaryItem(label=label, value=value or NOT_SPECIFIED)
        for label, value in result.summary.labelled_items()
    ]
    cards = [
        MovieCard(
            title=movie.title,
            year=movie.year,
            genre=movie.genre,
            why_recommended=movie.why_recommended,
            similar_to=movie.similar_to,
            cover_url=cover_url(movie.title, cover_template),
        )
        for movie in result.recommendations
    ]
    return ResultsView(
        summary=summary,
        count_label=f"{len(cards)} curated picks",
        cards=cards,
    )


def render_flow(flow: InteractionFlow, cover_template: str = DEFAULT_COVER_URL) -> FlowView:
    state = flow.state
    if isinstance(state, InputState):
        return FlowView(step=state.step, preferences=state.preferences, error=state.error)
    if isinstance(state, ResultsState):
        return FlowView(step=state.step, results=render_results(state.result, cover_template))
    return FlowView(step=state.step)

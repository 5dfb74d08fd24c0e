from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional

from cinematch.flow.view import FlowView


class PreferenceList(str, Enum):
    genres = "genres"
    favorite_movies = "favoriteMovies"
    actors = "actors"


class EntryRequest(BaseModel):
    value: str


class ScalarPreferencesRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    language: Optional[str] = None
    year_range: Optional[str] = None
    mood: Optional[str] = None


class SessionResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    view: FlowView

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PreferenceSummary(BaseModel):
    """The oracle's restatement of what it understood from the request."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    genres: str
    mood: str
    favorite_movies: str
    language: str
    year_range: str

    def labelled_items(self) -> List[Tuple[str, str]]:
        return [
            ("Genres", self.genres),
            ("Mood", self.mood),
            ("Favorite Movies", self.favorite_movies),
            ("Language", self.language),
            ("Year Range", self.year_range),
        ]


class Recommendation(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    title: str
    year: str
    genre: str
    why_recommended: str
    similar_to: str


class RecommendationResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: PreferenceSummary
    recommendations: List[Recommendation]


# Response schema handed to the oracle alongside the prompt
RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "OBJECT",
            "properties": {
                "genres": {"type": "STRING"},
                "mood": {"type": "STRING"},
                "favoriteMovies": {"type": "STRING"},
                "language": {"type": "STRING"},
                "yearRange": {"type": "STRING"},
            },
            "required": ["genres", "mood", "favoriteMovies", "language", "yearRange"],
        },
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "year": {"type": "STRING"},
                    "genre": {"type": "STRING"},
                    "whyRecommended": {"type": "STRING"},
                    "similarTo": {"type": "STRING"},
                },
                "required": ["title", "year", "genre", "whyRecommended", "similarTo"],
            },
        },
    },
    "required": ["summary", "recommendations"],
}

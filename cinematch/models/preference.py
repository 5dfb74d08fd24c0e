from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Wire name -> attribute name for the tag-like list fields
LIST_FIELDS = {
    "genres": "genres",
    "favoriteMovies": "favorite_movies",
    "favorite_movies": "favorite_movies",
    "actors": "actors",
}


class MoviePreference(BaseModel):
    """
    One user's stated tastes.

    The list fields behave like insertion-ordered sets: adding an empty or
    already present value is a no-op. Scalars are plain last-write-wins strings.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    genres: List[str] = Field(default_factory=list)
    favorite_movies: List[str] = Field(default_factory=list)
    actors: List[str] = Field(default_factory=list)
    language: str = ""
    year_range: str = ""
    mood: str = ""

    @field_validator("genres", "favorite_movies", "actors")
    @classmethod
    def _dedupe(cls, values: List[str]) -> List[str]:
        # Same rule as add(): drop empties and repeats, first occurrence wins
        unique = []
        for value in values:
            if value and value not in unique:
                unique.append(value)
        return unique

    def _list(self, field: str) -> List[str]:
        try:
            return getattr(self, LIST_FIELDS[field])
        except KeyError:
            raise ValueError(f"Unknown preference list: {field!r}") from None

    def add(self, field: str, value: str) -> None:
        values = self._list(field)
        if value and value not in values:
            values.append(value)

    def remove(self, field: str, value: str) -> None:
        values = self._list(field)
        if value in values:
            values.remove(value)

    def has_core_preference(self) -> bool:
        """At least a genre, a favorite movie or a mood is needed to ask for picks."""
        return bool(self.genres or self.favorite_movies or self.mood)

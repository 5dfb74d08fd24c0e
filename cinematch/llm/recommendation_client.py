from typing import Optional, Protocol

from pydantic import ValidationError

from cinematch.exceptions import RequestFailure
from cinematch.models.preference import MoviePreference
from cinematch.models.recommendation import RESPONSE_SCHEMA, RecommendationResult
from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import get_logger

logger = get_logger(__name__)


class Oracle(Protocol):
    def generate(self, prompt: str, response_schema: Optional[dict] = None) -> str:
        ...


def build_oracle(config_path: str = CONFIG_PATH) -> Oracle:
    """Instantiate the oracle backend named in the config."""
    backend = load_config(config_path)["oracle"]["backend"]
    if backend == "gemini":
        from cinematch.llm.gemini_client import GeminiClient
        return GeminiClient(config_path)
    if backend == "qwen":
        from cinematch.llm.qwen_client import QwenClient
        return QwenClient(config_path)
    raise ValueError(f"Unknown oracle backend: {backend!r}")


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class RecommendationClient:
    """
    Turns a MoviePreference into a RecommendationResult with a single oracle call.

    Every failure, whether the oracle raised or replied with something that does
    not fit RESPONSE_SCHEMA, surfaces as RequestFailure. Nothing is retried.
    """

    def __init__(self, oracle: Optional[Oracle] = None, config_path: str = CONFIG_PATH):
        self.config = load_config(config_path)
        self.oracle = oracle if oracle is not None else build_oracle(config_path)

        self.prompt_path = self.config["oracle"]["prompt_template"]
        with open(self.prompt_path, "r", encoding="utf-8") as f:
            self.prompt_template = f.read()

        self.min_recommendations = self.config["flow"]["min_recommendations"]

    def build_prompt(self, prefs: MoviePreference) -> str:
        return self.prompt_template.format(
            genres=", ".join(prefs.genres),
            favorite_movies=", ".join(prefs.favorite_movies),
            actors=", ".join(prefs.actors),
            language=prefs.language,
            year_range=prefs.year_range,
            mood=prefs.mood,
        )

    def get_recommendations(self, prefs: MoviePreference) -> RecommendationResult:
        prompt = self.build_prompt(prefs)

        try:
            response = self.oracle.generate(prompt, response_schema=RESPONSE_SCHEMA)
        except Exception as e:
            logger.error(f"Oracle call failed: {e!r}")
            raise RequestFailure("Oracle call failed") from e

        try:
            if not isinstance(response, str):
                raise TypeError(f"Oracle reply is {type(response).__name__}, not str")
            result = RecommendationResult.model_validate_json(strip_code_fence(response))
        except (ValidationError, TypeError) as e:
            logger.error(f"Failed to parse oracle reply: {e}")
            logger.debug(f"Unparseable reply: {response!r}")
            raise RequestFailure("Oracle reply did not match the response schema") from e

        self._check_expectations(prefs, result)
        logger.info(f"Oracle returned {len(result.recommendations)} recommendations")
        return result

    def _check_expectations(self, prefs: MoviePreference, result: RecommendationResult) -> None:
        # Asked of the oracle in the prompt but never enforced here
        if len(result.recommendations) < self.min_recommendations:
            logger.warning(
                f"Expected at least {self.min_recommendations} recommendations, "
                f"got {len(result.recommendations)}"
            )
        favorites = {title.casefold() for title in prefs.favorite_movies}
        repeated = [r.title for r in result.recommendations if r.title.casefold() in favorites]
        if repeated:
            logger.warning(f"Oracle recommended listed favorites: {', '.join(repeated)}")

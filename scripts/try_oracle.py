import sys
import os

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cinematch.exceptions import RequestFailure
from cinematch.llm.recommendation_client import RecommendationClient
from cinematch.models.preference import MoviePreference
from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import get_logger, log_config, log_error, log_header, log_recommendations_table, log_success

logger = get_logger(__name__)


def main():
    log_header("CineMatch oracle check")
    log_config(load_config(CONFIG_PATH)["oracle"], title="Oracle")

    client = RecommendationClient(config_path=CONFIG_PATH)

    prefs = MoviePreference()
    prefs.add("genres", "Sci-Fi")
    prefs.add("genres", "Thriller")
    prefs.add("favoriteMovies", "Inception")
    prefs.add("favoriteMovies", "Arrival")
    prefs.add("actors", "Amy Adams")
    prefs.mood = "Thoughtful"
    prefs.year_range = "2010-2020"

    logger.info(f"Preferences: {prefs.model_dump(by_alias=True)}")
    logger.debug(f"Prompt:\n{client.build_prompt(prefs)}")

    try:
        result = client.get_recommendations(prefs)
    except RequestFailure as e:
        log_error(f"{e} ({e.__cause__!r})")
        sys.exit(1)

    log_recommendations_table(result)
    log_success(f"{len(result.recommendations)} curated picks")


if __name__ == "__main__":
    main()

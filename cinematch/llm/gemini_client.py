import os
from typing import Optional

from dotenv import load_dotenv
from google import genai
from google.genai import types

from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()


class GeminiClient:
    """Hosted oracle: one generate_content call per prompt, constrained to JSON."""

    def __init__(self, config_path: str = CONFIG_PATH, api_key: Optional[str] = None):
        self.config = load_config(config_path)

        self.oracle_config = self.config["oracle"]
        self.model_name = self.oracle_config["gemini"]["model_name"]
        self.api_key = api_key if api_key is not None else os.getenv(self.oracle_config["api_key_env"], "")
        if not self.api_key:
            logger.warning(f"{self.oracle_config['api_key_env']} is not set; oracle calls will fail.")
        self._client = None

    @property
    def client(self) -> genai.Client:
        # Created on first use so a missing key only fails the call, not startup
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, response_schema: Optional[dict] = None) -> str:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        logger.debug(f"Calling {self.model_name} ({len(prompt)} prompt chars)")
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=config,
        )
        return response.text or ""


if __name__ == "__main__":
    client = GeminiClient()
    response = client.generate('Reply with {"hello": "world"} as JSON.')
    logger.info(f"Response: {response}")

import json
from collections import OrderedDict

import pytest
from fastapi.testclient import TestClient

from cinematch.api import main
from cinematch.flow.interaction import InteractionFlow
from cinematch.llm.recommendation_client import RecommendationClient

CONFIG_PATH = "config/config.yml"

SUMMARY = {
    "genres": "Sci-Fi",
    "mood": "",
    "favoriteMovies": "Inception",
    "language": "",
    "yearRange": "",
}

MOVIES = [
    ("Interstellar", "2014"),
    ("The Matrix", "1999"),
    ("Arrival", "2016"),
    ("Blade Runner 2049", "2017"),
    ("Ex Machina", "2014"),
]


def make_reply(n_items: int = 5) -> str:
    recommendations = [
        {
            "title": title,
            "year": year,
            "genre": "Sci-Fi",
            "whyRecommended": f"{title} shares the mind-bending tone you enjoy.",
            "similarTo": "Inception",
        }
        for title, year in (MOVIES * 2)[:n_items]
    ]
    return json.dumps({"summary": SUMMARY, "recommendations": recommendations})


class StubOracle:
    """Deterministic oracle: records every prompt and replays a canned reply."""

    def __init__(self, reply=None, error=None, on_call=None):
        self.reply = make_reply() if reply is None else reply
        self.error = error
        self.on_call = on_call
        self.calls = []

    def generate(self, prompt, response_schema=None):
        self.calls.append((prompt, response_schema))
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def oracle():
    return StubOracle()


@pytest.fixture
def recommendation_client(oracle):
    return RecommendationClient(oracle=oracle, config_path=CONFIG_PATH)


@pytest.fixture
def flow(recommendation_client):
    return InteractionFlow(recommendation_client)


@pytest.fixture
def api_client(recommendation_client, monkeypatch):
    monkeypatch.setattr(main, "recommendation_client", recommendation_client)
    monkeypatch.setattr(main, "sessions", OrderedDict())
    return TestClient(main.app)

import asyncio
import json

import pytest

from dailygames.cache_store import MemoryCacheStore
from dailygames.services.content_generator import ContentGenerator
from dailygames.services.gates_service import GatesService
from dailygames.services.invest_service import InvestService


def default_reply(prompt: str) -> str:
    """Well-formed replies for every prompt the services send."""
    if "Player judgment:" in prompt:
        return json.dumps({"godMessage": "THE GATES HAVE SPOKEN."})
    if "PLAYER QUESTION:" in prompt:
        return json.dumps({"answer": "I fed the neighbour's cat every day for ten years."})
    if "TRUE ALIGNMENT:" in prompt:
        return json.dumps(
            {
                "visible": {
                    "name": 'Douglas "Cash King" Winston',
                    "age": 67,
                    "occupation": "Parking inspector",
                    "causeOfDeath": "Slipped on a meter",
                    "quote": "Rules are rules.",
                },
                "hidden": {
                    "bio": "He ticketed everyone. He also fed stray cats.",
                    "bestActs": ["Fed stray cats", "Paid a stranger's fine"],
                    "worstActs": ["Ticketed an ambulance", "Lied on taxes", "Stole a pen"],
                },
            }
        )
    if "MARKET SIMULATOR" in prompt:
        return json.dumps({"unitsSold": 1200, "narrative": "Buyers lined up. Then the reviews arrived."})
    if "PLAYER SUGGESTION:" in prompt:
        return json.dumps({"revisedPitch": "Sharks, meet the future. It folds. It also sings."})
    if "SLOT ID:" in prompt:
        return json.dumps(
            {
                "invention": {
                    "title": "Pocket Oracle",
                    "pitch": "Sharks, this gadget predicts your lunch. It is never wrong.",
                    "category": "gadgets",
                },
                "hidden": {"notes": "Works only on Tuesdays", "regulatoryRisk": "medium", "demandProfile": "fad"},
            }
        )
    return ""


class ScriptedTextGenerator:
    """Stands in for the text-generation backend.

    ``reply`` is a string, an exception to raise, or a callable taking the prompt.
    """

    def __init__(self, reply=default_reply):
        self.reply = reply
        self.prompts = []

    async def complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        # yield so concurrent callers interleave like real network calls
        await asyncio.sleep(0)
        reply = self.reply(prompt) if callable(self.reply) else self.reply
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def text_generator():
    return ScriptedTextGenerator()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(clock):
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def content_generator(text_generator):
    return ContentGenerator(text_generator)


@pytest.fixture
def invest_service(cache_store, content_generator):
    return InvestService(cache_store, content_generator)


@pytest.fixture
def gates_service(cache_store, content_generator):
    return GatesService(cache_store, content_generator)


def run(coro):
    return asyncio.run(coro)

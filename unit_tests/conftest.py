import sys
from pathlib import Path

import pytest

# Add root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tools.gemini_client import GeminiConfig
from tools.retry_orchestrator import RetryOrchestrator


class FakeGeminiClient:
    """
    Stands in for GeminiTextClient.

    Each call to generate_text pops the next scripted reply; an Exception
    instance in the script is raised instead of returned.
    """

    def __init__(self, replies=None, available=True):
        self.config = GeminiConfig(credential="test-key" if available else None)
        self.replies = list(replies or [])
        self.prompts = []
        self.presets = []

    @property
    def available(self):
        return self.config.available

    async def generate_text(self, prompt, preset):
        self.prompts.append(prompt)
        self.presets.append(preset)
        if not self.replies:
            raise RuntimeError("No scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class RecordingSleep:
    """Async sleep replacement that records requested delays (seconds)."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_client():
    return FakeGeminiClient


@pytest.fixture
def orchestrator(recording_sleep):
    return RetryOrchestrator(GeminiConfig(credential="test-key"), sleep=recording_sleep)

import json
import os
from pathlib import Path
from types import SimpleNamespace

import groq
import httpx
import openai
import pytest

# Settings are read at import time
os.environ["USE_DUMMY_DATA"] = "true"
os.environ["TRUE_TOKEN"] = "صح"
os.environ["FALSE_TOKEN"] = "خطأ"

from ai_book.core.ai_services import AIService
from ai_book.core.config import config
from ai_book.core.utils import MemoryManager


class FakeCompletions:
    """Records chat.completions.create calls and answers from a queue"""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeImages:
    def __init__(self, b64_json="aW1hZ2U="):
        self.b64_json = b64_json
        self.calls = []

    def generate(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.b64_json, Exception):
            raise self.b64_json
        return SimpleNamespace(data=[SimpleNamespace(b64_json=self.b64_json)])


def make_groq_client(*replies):
    completions = FakeCompletions(replies)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.fixture
def sample_exam_dict():
    """Three-question exam covering every question type."""
    return {
        "title": "Water Cycle",
        "questions": [
            {
                "questionText": "Which process turns water into vapour?",
                "type": "MultipleChoice",
                "options": ["Evaporation", "Condensation", "Freezing", "Melting"],
                "correctAnswer": "Evaporation"
            },
            {
                "questionText": "Clouds form by ____.",
                "type": "FillInTheBlank",
                "correctAnswer": "condensation"
            },
            {
                "questionText": "Rain is a form of precipitation.",
                "type": "TrueFalse",
                "correctAnswer": "صح"
            }
        ]
    }


@pytest.fixture
def sample_exam_json(sample_exam_dict):
    return json.dumps(sample_exam_dict, ensure_ascii=False)


@pytest.fixture
def store():
    """Memory store without the background cleanup thread."""
    return MemoryManager(start_cleanup_thread=False)


@pytest.fixture
def dummy_ai():
    return AIService()


@pytest.fixture
def fake_groq():
    """Factory returning (client, completions) for queued replies."""
    return make_groq_client


@pytest.fixture
def fake_images():
    """Image client exposing images.generate like openai.OpenAI."""
    return SimpleNamespace(images=FakeImages())


@pytest.fixture
def groq_error():
    """A network failure as raised by the Groq SDK."""
    return groq.APIConnectionError(request=httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions"))


@pytest.fixture
def openai_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/images/generations"))


@pytest.fixture
def unicode_font(monkeypatch):
    """DejaVu Sans (covers Arabic) from the matplotlib distribution."""
    matplotlib = pytest.importorskip("matplotlib")
    font_dir = Path(matplotlib.get_data_path()) / "fonts" / "ttf"
    monkeypatch.setattr(config, "PDF_FONT_PATH", str(font_dir / "DejaVuSans.ttf"))
    monkeypatch.setattr(config, "PDF_BOLD_FONT_PATH", str(font_dir / "DejaVuSans-Bold.ttf"))
    return font_dir / "DejaVuSans.ttf"

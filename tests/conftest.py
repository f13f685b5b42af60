import pytest

from contentforge.errors import InferenceError


class StubClient:
    """Scripted stand-in for the Hugging Face client.

    Each call pops the next scripted item: strings are returned, exceptions
    are raised. Once the script runs out the last item repeats.
    """

    model = "stub/model"

    def __init__(self, *script):
        self.script = list(script) or [""]
        self.calls = []

    def generate(self, prompt, max_new_tokens=512):
        self.calls.append((prompt, max_new_tokens))
        index = min(len(self.calls), len(self.script)) - 1
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def prompts(self):
        return [prompt for prompt, _ in self.calls]

    @property
    def token_budgets(self):
        return [tokens for _, tokens in self.calls]


@pytest.fixture
def stub_client():
    return StubClient


@pytest.fixture
def backend_down():
    return InferenceError("HuggingFace error: 503 - model is loading", status_code=503)

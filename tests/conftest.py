import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ai.engine.capability import CapabilityState
from ai.engine.errors import InferenceFailure


class FakeProvider:
    """
    Records every generate call. Replies come from ``reply`` (a callable
    taking the instruction and user text) and ``fail_on`` makes the n-th
    call (1-based) raise InferenceFailure.
    """

    def __init__(self, state=None, reply=None, fail_on=None):
        self.state = state or CapabilityState.available()
        self.reply = reply or (lambda instruction, text: f"reply {len(self.calls)}")
        self.fail_on = fail_on
        self.calls = []
        self.capability_checks = 0

    def current_capability(self):
        self.capability_checks += 1
        return self.state

    async def generate(self, system_instruction, user_text, max_output_tokens):
        self.calls.append((system_instruction, user_text, max_output_tokens))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise InferenceFailure("model crashed")
        return self.reply(system_instruction, user_text)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def make_provider():
    return FakeProvider

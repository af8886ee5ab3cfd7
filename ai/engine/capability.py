import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .errors import CapabilityUnavailable, InferenceFailure

logger = logging.getLogger(__name__)


class UnavailableReason(str, Enum):
    NOT_ENABLED = "not_enabled"
    MODEL_NOT_READY = "model_not_ready"
    DEVICE_NOT_ELIGIBLE = "device_not_eligible"
    OTHER = "other"


@dataclass(frozen=True)
class CapabilityState:
    """
    Availability of the inference backend.

    ``reason`` is None when available. ``raw_reason`` keeps the backend's
    own wording for ``UnavailableReason.OTHER`` so unknown reasons are
    never lost.
    """

    reason: Optional[UnavailableReason] = None
    raw_reason: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.reason is None

    @classmethod
    def available(cls) -> "CapabilityState":
        return cls()

    @classmethod
    def unavailable(
            cls,
            reason: UnavailableReason,
            raw_reason: Optional[str] = None
    ) -> "CapabilityState":
        return cls(reason=reason, raw_reason=raw_reason)

    @classmethod
    def other(cls, raw_reason: str) -> "CapabilityState":
        return cls(reason=UnavailableReason.OTHER, raw_reason=raw_reason)


class InferenceProvider(Protocol):

    def current_capability(self) -> CapabilityState:
        ...

    async def generate(
            self,
            system_instruction: str,
            user_text: str,
            max_output_tokens: int
    ) -> str:
        ...


MESSAGES = {
    UnavailableReason.NOT_ENABLED: "AI inference is not enabled",
    UnavailableReason.MODEL_NOT_READY: "AI model not ready. Please try again later.",
    UnavailableReason.DEVICE_NOT_ELIGIBLE: "This device doesn't support the AI model",
}


def describe(state: CapabilityState) -> str:
    """Default human-readable text for a capability state."""
    if state.is_available:
        return "AI model available"

    if state.reason == UnavailableReason.OTHER:
        if state.raw_reason:
            return f"AI model unavailable: {state.raw_reason}"
        return "AI model unavailable"

    return MESSAGES[state.reason]


class StaticCapability:
    """
    Provider with a fixed state. Used when inference is switched off.
    """

    def __init__(self, state: CapabilityState):
        self.state = state

    def current_capability(self) -> CapabilityState:
        return self.state

    async def generate(self, system_instruction: str, user_text: str,
                       max_output_tokens: int) -> str:
        raise InferenceFailure(describe(self.state))


class InferenceAvailabilityGate:

    def __init__(self, provider: InferenceProvider):
        self.provider = provider

    def check(self) -> CapabilityState:
        # always ask the provider, device state can change between calls
        return self.provider.current_capability()

    def ensure_available(self) -> CapabilityState:
        state = self.check()

        if not state.is_available:
            logger.warning("Inference unavailable: %s", describe(state))
            raise CapabilityUnavailable(state)

        return state

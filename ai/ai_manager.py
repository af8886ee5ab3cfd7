import logging
import os

from dotenv import load_dotenv

from ai.engine.capability import (
    CapabilityState,
    InferenceAvailabilityGate,
    StaticCapability,
    UnavailableReason,
)
from ai.engine.config import InferenceConfig


class AIContainer:
    """
    Simple dependency container holding all AI services.
    """

    def __init__(self, provider, summarizer, answerer, gate):
        self.provider = provider
        self.summarizer = summarizer
        self.answerer = answerer
        self.gate = gate

    async def ensure_loaded(self) -> None:
        """
        Loads a local model if the provider has one. A load error is kept
        by the provider and reported through its capability state.
        """
        ensure_loaded = getattr(self.provider, "ensure_loaded", None)
        if ensure_loaded is None:
            return

        try:
            await ensure_loaded()
        except Exception as e:
            logging.error("❌ Model failed to load: %s", e)


def build_config() -> InferenceConfig:
    config = InferenceConfig()

    model_path = os.getenv("INFERENCE_MODEL_PATH")
    if model_path:
        config.local_model_path = model_path

    concurrency = os.getenv("INFERENCE_MAP_CONCURRENCY")
    if concurrency:
        config.map_concurrency = max(1, int(concurrency))

    return config


def build_provider(mode: str, config: InferenceConfig):
    if mode == "api":
        from ai.api.inference_api import APIInference
        return APIInference(temperature=config.temperature)

    if mode == "local":
        from ai.engine.inference import LocalInference
        return LocalInference(config)

    if mode != "off":
        logging.warning("Unknown INFERENCE_MODE %r, inference disabled", mode)

    return StaticCapability(
        CapabilityState.unavailable(UnavailableReason.NOT_ENABLED)
    )


def initialize_ai() -> AIContainer:
    """
    Initializes all AI-related services once at startup.

    A local model is not loaded here; use ``start_orchestrator()`` or
    ``AIContainer.ensure_loaded()``. Until then it reports MODEL_NOT_READY.
    """

    load_dotenv()

    logging.info("⏳ Initializing AI services...")

    mode = os.getenv("INFERENCE_MODE", "local")
    config = build_config()
    provider = build_provider(mode, config)

    from ai.engine.answerer import MapReduceAnswerer
    from ai.engine.summarizer import MapReduceSummarizer

    container = AIContainer(
        provider=provider,
        summarizer=MapReduceSummarizer(provider, config),
        answerer=MapReduceAnswerer(provider, config),
        gate=InferenceAvailabilityGate(provider)
    )

    logging.info("✅ AI services ready (mode=%s).", mode)

    return container


def create_orchestrator(ai: AIContainer | None = None):
    from core.orchestrator import ArticleOrchestrator

    ai = ai or initialize_ai()
    return ArticleOrchestrator(ai.summarizer, ai.answerer, ai.gate)


async def start_orchestrator(ai: AIContainer | None = None):
    """
    Builds the orchestrator and loads the local model first, so summaries
    and answers do not fail with MODEL_NOT_READY.
    """
    ai = ai or initialize_ai()
    await ai.ensure_loaded()
    return create_orchestrator(ai)

import logging

from ai.engine.capability import CapabilityState, InferenceAvailabilityGate, describe
from ai.engine.answerer import MapReduceAnswerer
from ai.engine.summarizer import MapReduceSummarizer
from core.navigation import NavigationCompletionTracker
from page.loader import PageLoader

logger = logging.getLogger(__name__)


class ArticleOrchestrator:
    """
    Caller-facing entry point: page loading, availability, summaries and
    answers. Results are returned, storing them is up to the caller.

    With a local model, build it through ``ai.ai_manager.start_orchestrator``
    so the model is loaded before the first summary or answer.
    """

    def __init__(
            self,
            summarizer: MapReduceSummarizer,
            answerer: MapReduceAnswerer,
            gate: InferenceAvailabilityGate,
            loader: PageLoader | None = None
    ):
        self.summarizer = summarizer
        self.answerer = answerer
        self.gate = gate
        self.loader = loader or PageLoader()
        self.tracker = NavigationCompletionTracker(self.loader.channel)

    # ---------------- AVAILABILITY ----------------

    def availability(self) -> CapabilityState:
        return self.gate.check()

    def availability_message(self) -> str:
        return describe(self.gate.check())

    # ---------------- PAGE ----------------

    async def await_completion(self, request_id: str, timeout: float | None = None) -> bool:
        return await self.tracker.await_completion(request_id, timeout)

    async def load_page(self, url: str, timeout: float | None = None) -> bool:
        request = self.loader.load(url)
        loaded = await self.await_completion(request.id, timeout)

        logger.info("Page %s %s", url, "loaded" if loaded else "failed to load")
        return loaded

    # ---------------- INFERENCE ----------------

    async def summarize(self, content: str) -> str:
        logger.info("Summarize called. Content length: %d chars", len(content or ""))
        return await self.summarizer.summarize(content)

    async def answer(self, content: str, question: str) -> str:
        logger.info("Answer called. Content length: %d chars", len(content or ""))
        return await self.answerer.answer(content, question)

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Tuple

from .capability import InferenceAvailabilityGate, InferenceProvider
from .chunking import Chunk, ChunkPlan, TextChunker, plan_chunks
from .config import InferenceConfig
from .errors import InferenceFailure, MissingInput


class MapReducePipeline:
    """
    Shared plumbing for the summarizer and the answerer: gate check, input
    check, chunk planning and the map step over chunks.

    Map calls run one after another unless ``config.map_concurrency`` is
    raised. Partial results always come back in chunk order.
    """

    def __init__(self, provider: InferenceProvider, config: InferenceConfig | None = None):
        self.provider = provider
        self.config = config or InferenceConfig()
        self.gate = InferenceAvailabilityGate(provider)
        self.chunker = TextChunker(self.config.chunk_size)
        self.logger = logging.getLogger(self.__class__.__module__)

    # -------- entry checks --------

    def _prepare(self, content: str) -> ChunkPlan:
        self.gate.ensure_available()

        if not content or not content.strip():
            raise MissingInput("content")

        return plan_chunks(len(content), self.config.chunk_size)

    def _is_single_pass(self, content: str, plan: ChunkPlan) -> bool:
        return len(content) <= plan.chunk_size

    # -------- inference --------

    async def _call(
            self,
            label: str,
            system_instruction: str,
            user_text: str,
            max_tokens: int
    ) -> str:
        # let a pending cancellation land before the call goes out
        await asyncio.sleep(0)

        start = time.perf_counter()
        try:
            text = await self.provider.generate(system_instruction, user_text, max_tokens)
        except InferenceFailure as e:
            self.logger.warning("%s failed: %s", label, e.detail)
            raise

        self.logger.info(
            "%s done in %.2fs (%d chars in, %d chars out)",
            label,
            time.perf_counter() - start,
            len(user_text),
            len(text)
        )
        return text

    async def _map(
            self,
            chunks: List[Chunk],
            build: Callable[[Chunk], Tuple[str, str]],
            max_tokens: int,
            label: str
    ) -> List[str]:

        async def run(chunk: Chunk) -> str:
            instruction, user_text = build(chunk)
            return await self._call(
                f"{label} {chunk.part}/{chunk.total}",
                instruction,
                user_text,
                max_tokens
            )

        if self.config.map_concurrency <= 1:
            partials = []
            for chunk in chunks:
                partials.append(await run(chunk))
            return partials

        return await self._map_bounded(chunks, run)

    async def _map_bounded(
            self,
            chunks: List[Chunk],
            run: Callable[[Chunk], Awaitable[str]]
    ) -> List[str]:
        semaphore = asyncio.Semaphore(self.config.map_concurrency)

        async def limited(chunk: Chunk) -> str:
            async with semaphore:
                return await run(chunk)

        tasks = [asyncio.ensure_future(limited(chunk)) for chunk in chunks]

        try:
            # gather keeps the input order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

from .pipeline import MapReducePipeline
from .prompts import PromptBuilder


class MapReduceSummarizer(MapReducePipeline):

    # -------- Public API --------

    async def summarize(self, content: str) -> str:
        plan = self._prepare(content)

        self.logger.info(
            "Summarize: %d chars, band %d-%d paragraphs",
            len(content),
            plan.min_paragraphs,
            plan.max_paragraphs
        )

        if self._is_single_pass(content, plan):
            return await self._call(
                "summary",
                PromptBuilder.build_summary_instruction(plan.paragraph_range),
                content,
                self.config.max_tokens_standard
            )

        chunks = self.chunker.split(content)
        self.logger.info("Content split into %d chunks", len(chunks))

        partials = await self._map(
            chunks,
            lambda chunk: (
                PromptBuilder.build_chunk_summary_instruction(chunk),
                chunk.text
            ),
            self.config.max_tokens_chunk,
            "chunk summary"
        )

        # band follows the original length, not the partials
        return await self._call(
            "meta summary",
            PromptBuilder.build_meta_summary_instruction(plan.paragraph_range),
            PromptBuilder.join_partials(partials),
            self.config.max_tokens_standard
        )

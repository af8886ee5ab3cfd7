from .errors import MissingInput
from .pipeline import MapReducePipeline
from .prompts import PromptBuilder, is_sentinel


class MapReduceAnswerer(MapReducePipeline):
    """
    Answers a question over text of any length.

    Long text is answered section by section; sections with nothing useful
    reply with the NO_RELEVANT_INFO sentinel. Deciding that the whole
    article has no answer is left to the final synthesis call.
    """

    async def answer(self, content: str, question: str) -> str:
        plan = self._prepare(content)

        question = (question or "").strip()
        if not question:
            raise MissingInput("question")

        self.logger.info("Answer: %d chars, question %r", len(content), question)

        if self._is_single_pass(content, plan):
            return await self._call(
                "answer",
                PromptBuilder.build_answer_instruction(),
                PromptBuilder.build_question_text(question, content),
                self.config.max_tokens_answer
            )

        chunks = self.chunker.split(content)
        self.logger.info("Content split into %d chunks", len(chunks))

        partials = await self._map(
            chunks,
            lambda chunk: (
                PromptBuilder.build_chunk_answer_instruction(chunk),
                PromptBuilder.build_question_text(question, chunk.text)
            ),
            self.config.max_tokens_answer,
            "chunk answer"
        )

        nothing_found = all(is_sentinel(p) for p in partials)
        if nothing_found:
            self.logger.info("No section had relevant information")

        return await self._call(
            "answer synthesis",
            PromptBuilder.build_answer_reduce_instruction(nothing_found),
            PromptBuilder.build_partial_answers_text(question, partials),
            self.config.max_tokens_answer
        )

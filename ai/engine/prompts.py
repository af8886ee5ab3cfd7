from typing import List, Tuple

from .chunking import Chunk

NO_RELEVANT_INFO = "No relevant information found in this section."


def _paragraphs(band: Tuple[int, int]) -> str:
    low, high = band
    if low == high:
        return f"{low} paragraph" + ("" if low == 1 else "s")
    return f"{low}-{high} paragraphs"


def is_sentinel(text: str) -> bool:
    normalized = text.strip().strip("\"'").rstrip(".").strip().lower()
    return normalized == NO_RELEVANT_INFO.rstrip(".").lower()


class PromptBuilder:

    # -------- summary --------

    @staticmethod
    def build_summary_instruction(band: Tuple[int, int]) -> str:
        return (
            f"Summarize this article in {_paragraphs(band)}. "
            "Focus on the main points and key insights."
        )

    @staticmethod
    def build_chunk_summary_instruction(chunk: Chunk) -> str:
        return (
            f"Summarize this section of an article "
            f"(part {chunk.part} of {chunk.total}) in 1-2 short paragraphs. "
            "Focus on the key points:"
        )

    @staticmethod
    def build_meta_summary_instruction(band: Tuple[int, int]) -> str:
        return (
            "These are summaries of different sections of a long article. "
            f"Create a cohesive summary in {_paragraphs(band)} that captures "
            "the overall main points and key insights:"
        )

    @staticmethod
    def join_partials(partials: List[str]) -> str:
        return "\n\n".join(partials)

    # -------- answer --------

    @staticmethod
    def build_answer_instruction() -> str:
        return (
            "Answer the user's question using only the article below. "
            "If the article does not contain the answer, say clearly that "
            "the article does not answer the question. Do not guess."
        )

    @staticmethod
    def build_chunk_answer_instruction(chunk: Chunk) -> str:
        return (
            f"This is part {chunk.part} of {chunk.total} of an article. "
            "Answer the user's question using only this section. "
            "If the section has nothing relevant to the question, reply "
            f'with exactly: "{NO_RELEVANT_INFO}"'
        )

    @staticmethod
    def build_answer_reduce_instruction(nothing_found: bool) -> str:
        if nothing_found:
            return (
                "None of the sections of the article contained information "
                "relevant to the user's question. Tell the user that the "
                "article does not answer the question. Do not attempt to "
                "answer it yourself."
            )

        return (
            "These are answers to the user's question drawn from different "
            "sections of one article, in article order. Sections marked "
            f'"{NO_RELEVANT_INFO}" had nothing relevant. Combine the rest '
            "into one coherent final answer using only what they say. If "
            "together they do not answer the question, say so."
        )

    @staticmethod
    def build_question_text(question: str, content: str) -> str:
        return f"QUESTION:\n{question}\n\nTEXT:\n{content}"

    @staticmethod
    def build_partial_answers_text(question: str, partials: List[str]) -> str:
        sections = "\n\n".join(
            f"Section {i + 1}:\n{answer}"
            for i, answer in enumerate(partials)
        )
        return f"QUESTION:\n{question}\n\nSECTION ANSWERS:\n{sections}"

from dataclasses import dataclass
from typing import List, Tuple

from .config import CHUNK_SIZE

# (upper bound exclusive, paragraph band), checked in order
PARAGRAPH_BANDS: List[Tuple[int, Tuple[int, int]]] = [
    (5_000, (1, 2)),
    (10_000, (2, 3)),
    (20_000, (2, 4)),
    (40_000, (3, 5)),
]
LONGEST_BAND = (3, 6)


@dataclass(frozen=True)
class ChunkPlan:
    chunk_size: int
    paragraph_range: Tuple[int, int]

    @property
    def min_paragraphs(self) -> int:
        return self.paragraph_range[0]

    @property
    def max_paragraphs(self) -> int:
        return self.paragraph_range[1]


@dataclass(frozen=True)
class Chunk:
    text: str
    index: int
    total: int

    @property
    def part(self) -> int:
        return self.index + 1


def plan_chunks(content_length: int, chunk_size: int = CHUNK_SIZE) -> ChunkPlan:
    """
    Pick the chunk size and summary paragraph band for a text length.

    Longer texts get a wider band so summary length grows slower than input.
    """
    length = max(content_length, 0)

    for upper, band in PARAGRAPH_BANDS:
        if length < upper:
            return ChunkPlan(chunk_size=chunk_size, paragraph_range=band)

    return ChunkPlan(chunk_size=chunk_size, paragraph_range=LONGEST_BAND)


class TextChunker:
    def __init__(self, chunk_size: int):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self.chunk_size = chunk_size

    def count(self, text: str) -> int:
        return -(-len(text) // self.chunk_size)

    def split(self, text: str) -> List[Chunk]:
        total = self.count(text)

        return [
            Chunk(
                text=text[start:start + self.chunk_size],
                index=index,
                total=total
            )
            for index, start in enumerate(range(0, len(text), self.chunk_size))
        ]

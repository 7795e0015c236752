"""
Chunk planning.

The first chunk of every array rides on a more expensive operation (the
contract deployment or class registration), so it may be smaller than the
chunks that follow.
"""

from typing import List, NamedTuple, Sequence, TypeVar

T = TypeVar("T")


class Chunk(NamedTuple):
    """A ``[offset, offset + length)`` window over an array."""
    offset: int
    length: int

    @property
    def stop(self) -> int:
        return self.offset + self.length

    def take(self, values: Sequence[T]) -> List[T]:
        return list(values[self.offset:self.stop])

    def __str__(self) -> str:
        return f"[{self.offset},{self.stop})"


def plan_chunks(total_length: int, initial_size: int, steady_size: int) -> List[Chunk]:
    """
    Split ``[0, total_length)`` into an initial window followed by steady ones.

    The last window is truncated to fit. An empty array has no windows.
    """
    if initial_size <= 0 or steady_size <= 0:
        raise ValueError(
            f"Chunk sizes must be positive, got initial={initial_size} steady={steady_size}"
        )

    chunks = []
    offset = 0
    size = initial_size
    while offset < total_length:
        length = min(size, total_length - offset)
        chunks.append(Chunk(offset, length))
        offset += length
        size = steady_size
    return chunks


def remaining_chunks(total_length: int, initial_size: int, steady_size: int) -> List[Chunk]:
    """The windows after the initial one."""
    return plan_chunks(total_length, initial_size, steady_size)[1:]

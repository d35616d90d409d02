"""A first-fit block allocator over a fixed address range."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from lemonkern.mathutil import round32

HEADER_SIZE = 8
DEFAULT_ALIGNMENT = 16


class MemoryCorruption(MemoryError):
    """The block chain runs past the end of the heap."""


class BlockState(Enum):
    FREE = auto()
    IN_USE = auto()


@dataclass
class _Block:
    state: BlockState
    size: int


class Heap:
    """Contiguous blocks, each behind an 8-byte header, from ``start`` on."""

    def __init__(self, start: int, length: int, alignment: int = DEFAULT_ALIGNMENT) -> None:
        if length <= 0:
            raise ValueError("heap length must be positive")
        self.alignment = alignment
        self.end = start + length
        self.start = round32(start, alignment) + HEADER_SIZE
        self.used = 0
        self._blocks: list[_Block] = []

    def _walk(self) -> Iterator[tuple[int, int, _Block]]:
        header = self.start
        for index, block in enumerate(self._blocks):
            yield index, header, block
            header += block.size + HEADER_SIZE

    def _index_of(self, address: int) -> Optional[int]:
        header = address - HEADER_SIZE
        for index, block_header, _ in self._walk():
            if block_header == header:
                return index
            if block_header > header:
                break
        return None

    def _destroy(self, index: int) -> bool:
        # Only the last block may vanish; one in the middle stays free.
        if index != len(self._blocks) - 1:
            return False
        del self._blocks[index]
        return True

    def _split(self, index: int, size: int) -> None:
        block = self._blocks[index]
        if block.size < size + 8 + HEADER_SIZE:
            return
        remainder = block.size - size - HEADER_SIZE
        block.size = size
        self._blocks.insert(index + 1, _Block(BlockState.FREE, remainder))
        self._destroy(index + 1)

    def _claim(self, index: int, header: int, required: int) -> int:
        self._split(index, required)
        block = self._blocks[index]
        block.state = BlockState.IN_USE
        self.used += block.size + HEADER_SIZE
        return header + HEADER_SIZE

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the address of the data."""
        if size <= 0:
            raise ValueError("allocation size must be positive")
        required = round32(size, self.alignment)
        if required % 8 == 0:
            required += 8
        if self.start + required + HEADER_SIZE > self.end:
            raise MemoryError(f"cannot allocate {size} bytes")

        run_start: Optional[int] = None
        run_header = 0
        run_bytes = 0
        header = self.start
        index = 0
        while index < len(self._blocks):
            block = self._blocks[index]
            if block.state is BlockState.FREE:
                if block.size >= required:
                    return self._claim(index, header, required)
                if index == len(self._blocks) - 1:
                    break
                if run_start is None:
                    run_start, run_header = index, header
                run_bytes += block.size + HEADER_SIZE
                if run_bytes - HEADER_SIZE >= required:
                    merged = _Block(BlockState.FREE, run_bytes - HEADER_SIZE)
                    self._blocks[run_start : index + 1] = [merged]
                    return self._claim(run_start, run_header, required)
            else:
                run_start = None
                run_bytes = 0
            header += block.size + HEADER_SIZE
            index += 1
            if header > self.end:
                raise MemoryCorruption(f"block chain passes heap end at {header:#x}")

        if header + HEADER_SIZE + required > self.end:
            raise MemoryError(f"cannot allocate {size} bytes")
        new_block = _Block(BlockState.IN_USE, required)
        if index < len(self._blocks):
            self._blocks[index] = new_block
        else:
            self._blocks.append(new_block)
        self.used += required + HEADER_SIZE
        return header + HEADER_SIZE

    def free(self, address: int) -> bool:
        """Release the block at ``address``; False if it was not allocated."""
        if address < self.start or address > self.end:
            return False
        index = self._index_of(address)
        if index is None:
            return False
        block = self._blocks[index]
        if block.state is not BlockState.IN_USE:
            return False
        self.used -= block.size + HEADER_SIZE
        block.state = BlockState.FREE
        self._destroy(index)
        return True

    def realloc(self, address: int, size: int) -> Optional[int]:
        """Make the block at ``address`` hold ``size`` bytes.

        The block is kept when it is already large enough; otherwise it is
        freed and a new one allocated, without copying. A size of zero frees
        the block and returns None.
        """
        if size == 0:
            self.free(address)
            return None
        if self.block_size(address) >= size:
            return address
        self.free(address)
        return self.malloc(size)

    def calloc(self, number: int, size: int) -> int:
        """Allocate room for ``number`` items of ``size`` bytes each."""
        return self.malloc(number * size)

    def block_size(self, address: int) -> int:
        """Usable size of the block whose data starts at ``address``."""
        index = self._index_of(address)
        if index is None:
            raise ValueError(f"no block at {address:#x}")
        return self._blocks[index].size
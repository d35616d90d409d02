"""Path tokenising and per-process file descriptor tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterator, Optional

SEPARATORS = frozenset("/\\>")
FIRST_FD = 3


def is_separator(char: str) -> bool:
    """True for the path separators '/', '\\' and '>'."""
    return char in SEPARATORS and len(char) == 1


def skip_separators(path: str) -> str:
    """The rest of ``path`` after any leading separators."""
    return path.lstrip("/\\>")


def next_token(path: str) -> str:
    """The rest of ``path`` from its first separator on ('' if there is none)."""
    for position, char in enumerate(path):
        if is_separator(char):
            return path[position:]
    return ""


def is_last_token(path: str) -> bool:
    """True if ``path`` holds no token, or one token with nothing after it."""
    token = skip_separators(path)
    if not token:
        return True
    return next_token(token) == ""


def iter_path(path: str) -> Iterator[str]:
    """Yield the non-empty components of ``path`` in order."""
    rest = path
    while True:
        token_start = skip_separators(rest)
        if not token_start:
            return
        rest = next_token(token_start)
        yield token_start[: len(token_start) - len(rest)]


class FdKind(Enum):
    """Kinds of file descriptor a process can hold."""

    SOCKET = auto()


_SUPPORTED_KINDS = frozenset({FdKind.SOCKET})

FdWrite = Callable[..., object]


@dataclass
class FileDescriptor:
    """An open descriptor: its number, kind and write handler."""

    number: int
    kind: FdKind
    write: Optional[FdWrite] = None


@dataclass
class FdTable:
    """The descriptors one process has open, numbered from ``next_number``."""

    next_number: int = FIRST_FD
    descriptors: list[FileDescriptor] = field(default_factory=list)

    def create(self, kind: FdKind, write: Optional[FdWrite] = None) -> FileDescriptor:
        """Open a descriptor of ``kind`` with the next free number."""
        kind = FdKind(kind)
        if kind not in _SUPPORTED_KINDS:
            raise ValueError(f"unsupported descriptor kind {kind!r}")
        descriptor = FileDescriptor(self.next_number, kind, write)
        self.next_number += 1
        self.descriptors.append(descriptor)
        return descriptor

    def find(self, number: int) -> Optional[FileDescriptor]:
        """The descriptor with ``number``, or None."""
        return next((fd for fd in self.descriptors if fd.number == number), None)

    def __iter__(self) -> Iterator[FileDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)
"""Floppy drive geometry: LBA to CHS conversion and drive type tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

SECTOR_SIZE = 512

RATE_500KBPS = 0
RATE_300KBPS = 1
RATE_250KBPS = 2
RATE_1MBPS = 3

PERPENDICULAR_FLAG = 0x40

_MASK32 = 0xFFFFFFFF


class FloppyType(IntEnum):
    """Drive types as reported in the CMOS floppy register nibbles."""

    NONE = 0
    KB_360 = 1
    MB_1_2 = 2
    KB_720 = 3
    MB_1_44 = 4
    MB_2_88 = 5


@dataclass(frozen=True)
class CHS:
    """A cylinder/head/sector address; sectors count from 1."""

    cylinder: int
    head: int
    sector: int

    def pack(self) -> int:
        """Pack into one 32-bit word: cylinder << 16, head << 8, sector."""
        return ((self.cylinder << 16) | (self.head << 8) | self.sector) & _MASK32

    @classmethod
    def unpack(cls, value: int) -> "CHS":
        """Split a packed word back into its cylinder, head and sector."""
        return cls(
            cylinder=(value >> 16) & 0xFFFF,
            head=(value >> 8) & 0xFF,
            sector=value & 0xFF,
        )


def lba_to_chs(lba: int, heads: int, sectors: int) -> CHS:
    """Convert a logical block address for a disk with the given geometry."""
    if heads <= 0 or sectors <= 0:
        raise ValueError("heads and sectors per track must be positive")
    if lba < 0:
        raise ValueError("logical block address must not be negative")
    return CHS(
        cylinder=lba // (heads * sectors),
        head=(lba // sectors) % heads,
        sector=(lba % sectors) + 1,
    )


def data_rate(kind: FloppyType) -> int:
    """Configuration register value selecting the data rate for ``kind``."""
    kind = FloppyType(kind)
    if kind is FloppyType.NONE:
        raise ValueError("no data rate without a drive")
    if kind is FloppyType.MB_2_88:
        return RATE_1MBPS | PERPENDICULAR_FLAG
    if kind in (FloppyType.MB_1_44, FloppyType.MB_1_2):
        return RATE_500KBPS
    return RATE_250KBPS


_TRACK_SECTORS = {
    FloppyType.NONE: 0,
    FloppyType.MB_2_88: 36,
    FloppyType.MB_1_44: 18,
    FloppyType.MB_1_2: 15,
    FloppyType.KB_720: 9,
    FloppyType.KB_360: 9,
}


def track_sectors(kind: FloppyType) -> int:
    """Sectors per track for a drive of type ``kind``."""
    return _TRACK_SECTORS[FloppyType(kind)]


def floppy_types_from_cmos(value: int) -> tuple[FloppyType, FloppyType]:
    """Decode the CMOS floppy register into (first drive, second drive)."""
    return FloppyType((value >> 4) & 0x0F), FloppyType(value & 0x0F)
# lemonkern

Subsystems of a small hobby operating-system kernel, as a plain Python
library. Every piece works on ordinary Python values: integers, lists of
32-bit ARGB pixels, byte arrays and callbacks. You can use and test each one
without any hardware. The package has no dependencies beyond the standard
library.

## Modules

- `lemonkern.mathutil`: integer helpers with 32- and 64-bit wrapping.
  - `round32` rounds up to a power-of-two multiple.
  - `abs8`, `abs16`, `abs32` and `abs64` return absolute values; the minimum
    value wraps to itself.
  - `clz32`, `clz64`, `ctz32` and `ctz64` count leading and trailing zeros and
    raise `ValueError` for zero. `ffs64`, `popcount32` and `popcount64` also
    count bits.
  - `shl64`, `ashr64` and `lshr64` shift, taking the count modulo 64.
  - `udivmod64`, `div64` and `mod64` divide; division by zero raises
    `ZeroDivisionError`.
  - `number_text_suffix` gives "st", "nd", "rd" or "th".
  - `log_approx` finds a logarithm by stepwise search.
- `lemonkern.drive`: floppy geometry.
  - `lba_to_chs` returns a `CHS`. `CHS.pack` and `CHS.unpack` convert to and
    from one 32-bit word.
  - `FloppyType` lists the CMOS drive types. `data_rate` and `track_sectors`
    give per-type values; `data_rate` raises `ValueError` for
    `FloppyType.NONE`.
  - `floppy_types_from_cmos` decodes the CMOS floppy register.
- `lemonkern.fspath`: path tokenising with `/`, `\` and `>` as separators.
  - `is_separator`, `skip_separators`, `next_token`, `is_last_token` and
    `iter_path` handle paths.
  - `FdTable` is a per-process table of `FileDescriptor` objects, numbered
    from 3. Only `FdKind.SOCKET` can be created.
- `lemonkern.memory`: `Heap(start, length, alignment=16)`, a first-fit block
  allocator over an address range. It tracks block addresses and sizes only
  and stores no data bytes.
  - `malloc` raises `ValueError` for a size of zero or less, and
    `MemoryError` when no room is left. It raises `MemoryCorruption` if the
    block chain runs past the heap end.
  - `free` returns `False` for an address that is not allocated.
  - `realloc` keeps a block that is already large enough. Otherwise it frees
    the block and allocates a new one, without copying.
  - `calloc` allocates `number * size` bytes.
  - `block_size` returns a block's usable size.
  - `used` counts allocated bytes, headers included.
- `lemonkern.displays`: `DisplayRegistry.create`, `register` and
  `get_default`. Only a non-virtual display created while the registry is
  empty is selectable.
  - Each `Display` has `listen`, `resize`, `crunch` and `close`, which notify
    listeners with `DisplayEvent` values. A crunch also sends a resize.
- `lemonkern.gpu`: `software_rect_fill`, `software_rect_draw` and
  `software_line_draw` draw on byte framebuffers at 8, 16, 24 or 32 bpp.
  Other depths raise `ValueError`.
  - `Gpu` wraps these routines with `get_cap`, `rect_fill`, `rect_draw` and
    `line_draw`.
  - `GpuRegistry` starts with a "Software" GPU. `create` makes a GPU that
    copies it with ranking 1. `register` makes the highest-ranked GPU the
    `default()`.
- `lemonkern.colour`:
  - `legacy_colour` maps indices of the 16-colour palette.
  - `alpha_blend`, `degrade_step` and `rgb_degrade` mix colours.
  - `rgb32_to_rgb4`, `rgb4_to_attr`, `rgb_align` and `vga_palette` convert
    for VGA.
  - `crunch` packs 32-bit pixels to 4 (planar), 8, 15, 16, 24 or 32 bpp.
- `lemonkern.rect`: `Rect2D` ARGB framebuffers.
  - `blank` creates one filled with a colour.
  - `blit` copies, `blit_alpha` blends and `blit_keyed` skips fully
    transparent pixels.
  - `fill`, `blit_pixels`, `fill_row` and `scroll` change the contents; all
    operations clip to the rectangle.
- `lemonkern.windows`: `WindowManager(width, height)` manages windows and
  taskbar buttons.
  - `create_window` centres a new window. `create_taskbar` adds a button.
  - `move_window` keeps the top edge on screen. `close_window`, `set_title`,
    `set_progname` and `taskbar_set_text` change windows and buttons.
  - `window_at` and `button_at` hit-test. `raise_window` changes stacking
    order.
  - `resize` keeps the old background.
  - `handle_mouse` takes `MouseEvent` values: it clicks taskbar buttons,
    focuses and raises windows, drags them by the title bar, and forwards the
    event to the active window in window coordinates.
- `lemonkern.scheduler`: a round-robin `Scheduler` of `Process` records,
  starting with a system `init` process.
  - `spawn`, `find` (with `CURRENT_PID` meaning the running process),
    `pause`, `next_process`, `switch_task`, `set_quantum` and `fork` manage
    processes.
  - `kill(pid, signal)` follows these rules. Signal 0 checks that the process
    exists. 19 (`SIGSTOP`) pauses and 18 (`SIGCONT`) resumes. Any other
    signal removes the process. Kill handlers may refuse with -1. Unknown
    pids raise `ProcessLookupError`.

## Example

```python
from lemonkern.memory import Heap
from lemonkern.drive import lba_to_chs

heap = Heap(0x100000, 1 << 16)
addr = heap.malloc(100)
heap.free(addr)

chs = lba_to_chs(40, 2, 18)   # CHS(cylinder=1, head=0, sector=5)
```

## What it does not do

This is a library of kernel data structures and algorithms, not a kernel:

- It does not boot or access hardware, and it performs no floppy or port I/O.
- The scheduler keeps process records but never runs a process's `entry`.
- It has no keyboard input, no keyboard layouts, no event queue and no text
  or font rendering.

## Running the tests

```
pip install -e ".[test]"
pytest
```
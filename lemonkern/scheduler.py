"""Round-robin process scheduling: creation, pausing, signals and forking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from lemonkern.fspath import FdTable

CURRENT_PID = 0xFFFFFFFFFFFFFFFF

SIGKILL = 9
SIGCONT = 18
SIGSTOP = 19

DEFAULT_MAX_QUANTUM = 20

KillHandler = Callable[[int], int]
EventHandler = Callable[[Any], Any]


@dataclass(frozen=True)
class FixedReplyKillHandler:
    """A kill handler that answers every signal with the same reply."""

    reply: int

    def __call__(self, signal: int) -> int:
        return self.reply


default_kill_handler = FixedReplyKillHandler(0)
"""Accept every signal."""

force_alive_kill_handler = FixedReplyKillHandler(1)
"""Kill handler used by processes that must keep running."""


@dataclass(eq=False)
class Process:
    """A schedulable process and the resources it holds.

    ``killed`` is true while the process is paused or dead; the scheduler
    never picks such a process to run.
    """

    name: str
    pid: int
    entry: Optional[Callable[..., Any]] = None
    killed: bool = True
    system: bool = False
    quantum: int = 0
    kill_handler: KillHandler = default_kill_handler
    recv_event: Optional[EventHandler] = None
    recv_global_event: Optional[EventHandler] = None
    fds: FdTable = field(default_factory=FdTable)
    windows: list[Any] = field(default_factory=list)
    allocs: list[Any] = field(default_factory=list)
    active_process: Optional["Process"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.active_process is None:
            self.active_process = self


class Scheduler:
    """Processes in creation order, run round robin starting from ``init``."""

    def __init__(
        self,
        max_quantum: int = DEFAULT_MAX_QUANTUM,
        cleanup: Optional[Callable[[Process], Any]] = None,
    ) -> None:
        self.max_quantum = max_quantum
        self.sleeping = False
        self._cleanup = cleanup
        init = Process(
            name="init",
            pid=0,
            killed=False,
            system=True,
            quantum=1,
            kill_handler=force_alive_kill_handler,
        )
        self.processes: list[Process] = [init]
        self._pid_top = 1
        self._step = 0
        self.current: Process = init
        self.active: Process = init

    def spawn(
        self,
        name: str,
        entry: Optional[Callable[..., Any]] = None,
        paused: bool = False,
    ) -> Process:
        """Create a process and append it to the run queue."""
        process = Process(
            name=name,
            pid=self._pid_top,
            entry=entry,
            killed=paused,
            quantum=self.max_quantum // 2,
        )
        self._pid_top += 1
        self.processes.append(process)
        return process

    def find(self, pid: int) -> Optional[Process]:
        """The process with ``pid``; CURRENT_PID means the running one."""
        if pid == CURRENT_PID:
            pid = self.current.pid
        return next((p for p in self.processes if p.pid == pid), None)

    def _require(self, pid: int) -> Process:
        process = self.find(pid)
        if process is None:
            raise ProcessLookupError(f"no process with pid {pid}")
        return process

    def pause(self, pid: int, paused: bool) -> None:
        """Pause or resume the process with ``pid``."""
        self._require(pid).killed = bool(paused)

    def next_process(self) -> Process:
        """Advance round robin to the next runnable process and return it."""
        count = len(self.processes)
        for offset in range(1, count + 1):
            index = (self._step + offset) % count
            candidate = self.processes[index]
            if not candidate.killed:
                self._step = index
                return candidate
        raise RuntimeError("no runnable process")

    def _remove(self, process: Process) -> None:
        index = self.processes.index(process)
        del self.processes[index]
        if index <= self._step:
            self._step -= 1

    def kill(self, pid: int, signal: int) -> bool:
        """Send ``signal`` to ``pid``.

        Signal 0 only checks that the process exists. Signals 9, 18 and 19
        bypass the kill handler unless the target is a system process; a
        handler returning -1 refuses the signal and False is returned.
        Signal 19 pauses, 18 resumes and any other signal ends the process.
        """
        process = self._require(pid)
        if signal == 0:
            return True
        if signal not in (SIGKILL, SIGCONT, SIGSTOP) or process.system:
            if process.kill_handler(signal) == -1:
                return False
        if signal in (SIGCONT, SIGSTOP):
            process.killed = signal == SIGSTOP
            return True
        is_current = process is self.current
        process.killed = True
        if is_current:
            self.current = self.next_process()
            self.active = self.current.active_process or self.current
        self._remove(process)
        if self._cleanup is not None:
            self._cleanup(process)
        return True

    def switch_task(self) -> Process:
        """Save the running process's state and switch to the next runnable one."""
        if len(self.processes) <= 1 or self.sleeping:
            return self.current
        self.current.active_process = self.active
        process = self.next_process()
        self.current = process
        self.active = process.active_process or process
        return process

    def set_quantum(self, process: Process, quantum: int) -> None:
        """Set the time slice of ``process``; zero is ignored."""
        if not quantum:
            return
        process.quantum = quantum

    def fork(self) -> Process:
        """Duplicate the running process as a runnable child named ``<name>-2``."""
        parent = self.current
        child = self.spawn(parent.name + "-2", parent.entry, paused=True)
        child.system = parent.system
        child.kill_handler = parent.kill_handler
        child.active_process = child
        child.killed = False
        return child
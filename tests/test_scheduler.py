import pytest

from lemonkern.scheduler import (
    CURRENT_PID,
    SIGCONT,
    SIGKILL,
    SIGSTOP,
    Scheduler,
)


def test_init_process_is_current_and_system():
    sched = Scheduler()
    assert sched.current.name == "init"
    assert sched.current.pid == 0
    assert sched.current.system is True
    assert sched.active is sched.current


def test_spawn_assigns_increasing_pids():
    sched = Scheduler()
    a = sched.spawn("a")
    b = sched.spawn("b")
    assert b.pid == a.pid + 1
    assert a.pid > sched.current.pid
    assert sched.processes[-2:] == [a, b]


def test_spawn_quantum_is_half_maximum():
    sched = Scheduler(max_quantum=40)
    assert sched.spawn("a").quantum == 20


def test_set_quantum_ignores_zero():
    sched = Scheduler()
    proc = sched.spawn("a")
    sched.set_quantum(proc, 7)
    sched.set_quantum(proc, 0)
    assert proc.quantum == 7


def test_round_robin_order():
    sched = Scheduler()
    a = sched.spawn("a")
    b = sched.spawn("b")
    order = [sched.switch_task() for _ in range(4)]
    assert order == [a, b, sched.processes[0], a]


def test_paused_process_is_skipped():
    sched = Scheduler()
    a = sched.spawn("a", paused=True)
    b = sched.spawn("b")
    assert a.killed is True
    assert sched.switch_task() is b


def test_switch_with_single_process_keeps_current():
    sched = Scheduler()
    init = sched.current
    assert sched.switch_task() is init


def test_find_current_pid():
    sched = Scheduler()
    a = sched.spawn("a")
    sched.switch_task()
    assert sched.find(CURRENT_PID) is a
    assert sched.find(a.pid + 100) is None


def test_pause_unknown_pid_raises():
    sched = Scheduler()
    with pytest.raises(ProcessLookupError):
        sched.pause(99, True)


def test_kill_unknown_pid_raises():
    sched = Scheduler()
    with pytest.raises(ProcessLookupError):
        sched.kill(99, SIGKILL)


def test_stop_and_continue():
    sched = Scheduler()
    a = sched.spawn("a")
    assert sched.kill(a.pid, SIGSTOP) is True
    assert a.killed is True
    sched.kill(a.pid, SIGCONT)
    assert a.killed is False
    assert a in sched.processes


def test_signal_zero_only_checks():
    sched = Scheduler()
    a = sched.spawn("a")
    assert sched.kill(a.pid, 0) is True
    assert a in sched.processes


def test_kill_removes_and_cleans_up():
    cleaned = []
    sched = Scheduler(cleanup=cleaned.append)
    a = sched.spawn("a")
    sched.kill(a.pid, SIGKILL)
    assert a not in sched.processes
    assert cleaned == [a]
    assert a.killed is True


def test_handler_can_refuse_other_signals():
    sched = Scheduler()
    a = sched.spawn("a")
    a.kill_handler = lambda signal: -1
    assert sched.kill(a.pid, 15) is False
    assert a in sched.processes
    assert sched.kill(a.pid, SIGKILL) is True
    assert a not in sched.processes


def test_system_process_handler_consulted_for_sigkill():
    sched = Scheduler()
    a = sched.spawn("a")
    a.system = True
    a.kill_handler = lambda signal: -1
    assert sched.kill(a.pid, SIGKILL) is False
    assert a in sched.processes


def test_killing_current_switches_to_next():
    sched = Scheduler()
    a = sched.spawn("a")
    b = sched.spawn("b")
    sched.switch_task()
    assert sched.current is a
    sched.kill(CURRENT_PID, SIGKILL)
    assert sched.current is b
    assert sched.switch_task() is sched.processes[0]


def test_killing_last_runnable_raises():
    sched = Scheduler()
    with pytest.raises(RuntimeError):
        sched.kill(CURRENT_PID, SIGKILL)


def test_fork_copies_current():
    sched = Scheduler()
    a = sched.spawn("worker")
    a.system = True
    sched.switch_task()
    child = sched.fork()
    assert child.name == "worker-2"
    assert child.system is True
    assert child.killed is False
    assert child.kill_handler is a.kill_handler
    assert child.active_process is child
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from subnode.local.config import MergedSettings
from subnode.local.supervisor import NodeSupervisor
from subnode.local.supervisor.persistence import FileStateStore
from subnode.local.supervisor.process_utils import ProcessControl, ProcessGone, ProcessStats
from subnode.local.supervisor.prompts import Prompter


class ScriptedPrompter(Prompter):
    """Answers questions from a fixed list, recording every question asked."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        return self.answers.pop(0)


class FakeProcessControl(ProcessControl):
    """In-memory process table standing in for real node processes."""

    def __init__(self) -> None:
        self.next_pid = 4242
        self.alive: set = set()
        self.spawned: List[Dict] = []
        self.signals: List[tuple] = []
        self.wait_calls: List[tuple] = []
        self.die_on_start = False
        self.ignore_term = False
        self.unkillable = False
        self.process_stats: Optional[ProcessStats] = None

    def spawn(self, args, cwd, log_path) -> int:
        pid = self.next_pid
        self.next_pid += 1
        self.spawned.append({"pid": pid, "args": list(args), "cwd": Path(cwd), "log_path": Path(log_path)})
        if not self.die_on_start:
            self.alive.add(pid)
        return pid

    def is_alive(self, pid: int) -> bool:
        return pid in self.alive

    def terminate(self, pid: int) -> None:
        if pid not in self.alive:
            raise ProcessGone(pid)
        self.signals.append(("TERM", pid))
        if not self.ignore_term:
            self.alive.discard(pid)

    def kill(self, pid: int) -> None:
        if pid not in self.alive:
            raise ProcessGone(pid)
        self.signals.append(("KILL", pid))
        if not self.unkillable:
            self.alive.discard(pid)

    def wait_for_exit(self, pid: int, timeout: float) -> bool:
        self.wait_calls.append((pid, timeout))
        return pid not in self.alive

    def stats(self, pid: int) -> Optional[ProcessStats]:
        return self.process_stats


@pytest.fixture
def settings(tmp_path: Path) -> MergedSettings:
    node_dir = tmp_path / "subtensor"
    node_dir.mkdir()
    return MergedSettings(
        NODE_DIR=node_dir,
        NODE_BIN=node_dir / "target" / "release" / "node-subtensor",
        LOG_FILE=node_dir / "subtensor.log",
        PID_FILE=node_dir / "subtensor.pid",
        MODE_FILE=node_dir / "last_mode.txt",
        DB_PATH=node_dir / "data" / "chains" / "bittensor" / "db" / "full",
        MANAGER_LOG_PATH=node_dir / "manage_node.log",
        BASE_FLAGS=["--database", "rocksdb", "--no-mdns"],
        CPU_CORES="0-5",
    )


@pytest.fixture
def processes() -> FakeProcessControl:
    return FakeProcessControl()


@pytest.fixture
def store(settings) -> FileStateStore:
    return FileStateStore(settings.PID_FILE, settings.MODE_FILE)


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_supervisor(settings, store, processes, sleeps):
    """Builds a supervisor over the temp node directory that answers prompts from the given list."""
    def _make(*answers: str) -> NodeSupervisor:
        return NodeSupervisor(
            settings=settings,
            store=store,
            process_control=processes,
            prompter=ScriptedPrompter(*answers),
            sleep=sleeps.append,
        )
    return _make

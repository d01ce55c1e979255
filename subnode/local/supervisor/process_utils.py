import time
import psutil
import logging
import subprocess
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, List, Optional
from .errors import LaunchFailedError, SignalError

log = logging.getLogger(__name__)


class ProcessGone(Exception):
    """The process exited before a signal could be delivered."""


@dataclass
class ProcessStats:
    cpu_percent: float
    rss_bytes: int
    create_time: float

    @property
    def uptime_seconds(self) -> float:
        return max(0.0, time.time() - self.create_time)


class ProcessControl:
    """
    Spawns and signals the node process.

    The supervisor only talks to the node through this interface so the
    lifecycle can be exercised without launching real binaries.
    """

    def spawn(self, args: List[str], cwd: Path, log_path: Path) -> int:
        raise NotImplementedError

    def is_alive(self, pid: int) -> bool:
        raise NotImplementedError

    def terminate(self, pid: int) -> None:
        raise NotImplementedError

    def kill(self, pid: int) -> None:
        raise NotImplementedError

    def wait_for_exit(self, pid: int, timeout: float) -> bool:
        raise NotImplementedError

    def stats(self, pid: int) -> Optional[ProcessStats]:
        return None


class PsutilProcessControl(ProcessControl):
    """Process control backed by subprocess and psutil."""

    def __init__(self) -> None:
        # Children spawned by this invocation, so they can be reaped once they exit.
        self._children: Dict[int, subprocess.Popen] = {}

    def spawn(self, args: List[str], cwd: Path, log_path: Path) -> int:
        """
        Launches a detached process with its output appended to a log file.

        :param args: The full command line.
        :param cwd: Working directory of the process.
        :param log_path: File receiving stdout and stderr, opened in append mode.
        :return: The PID of the new process.
        :raises LaunchFailedError: If the executable cannot be started.
        """
        log.debug(f"Spawning: {' '.join(args)} (cwd={cwd})")
        try:
            with open(log_path, "ab") as log_file:
                p = subprocess.Popen(
                    args,
                    stdin=subprocess.DEVNULL,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                    cwd=str(cwd),
                    start_new_session=True,
                )
        except OSError as e:
            raise LaunchFailedError(f"Could not launch '{args[0]}': {e}") from e
        self._children[p.pid] = p
        return p.pid

    def is_alive(self, pid: int) -> bool:
        child = self._children.get(pid)
        if child is not None and child.poll() is not None:
            return False
        if not psutil.pid_exists(pid):
            return False
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # Exists but belongs to someone else; it is still alive.
            return True

    def _signal(self, pid: int, force: bool) -> None:
        try:
            proc = psutil.Process(pid)
            if force:
                proc.kill()
            else:
                proc.terminate()
        except psutil.NoSuchProcess as e:
            raise ProcessGone(pid) from e
        except psutil.AccessDenied as e:
            raise SignalError(f"Permission denied sending {'SIGKILL' if force else 'SIGTERM'} to PID {pid}.") from e

    def terminate(self, pid: int) -> None:
        self._signal(pid, force=False)

    def kill(self, pid: int) -> None:
        self._signal(pid, force=True)

    def wait_for_exit(self, pid: int, timeout: float) -> bool:
        """Waits up to `timeout` seconds for the process to exit. Returns True once it has."""
        try:
            psutil.Process(pid).wait(timeout=timeout)
            return True
        except psutil.NoSuchProcess:
            return True
        except psutil.TimeoutExpired:
            return not self.is_alive(pid)

    def stats(self, pid: int) -> Optional[ProcessStats]:
        try:
            proc = psutil.Process(pid)
            cpu = proc.cpu_percent(interval=0.1)
            with proc.oneshot():
                return ProcessStats(
                    cpu_percent=cpu,
                    rss_bytes=proc.memory_info().rss,
                    create_time=proc.create_time(),
                )
        except psutil.Error as e:
            log.debug(f"Could not read stats for PID {pid}: {e}")
            return None

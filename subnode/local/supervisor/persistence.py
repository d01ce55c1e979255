import logging
from pathlib import Path
from dataclasses import dataclass, replace
from typing import Optional, Tuple
from .node_config import RunMode

log = logging.getLogger(__name__)

UNKNOWN_MODE = "unknown"


@dataclass
class NodeState:
    """
    The persisted bookkeeping of the supervised node.

    `pid` mirrors the PID file and `mode` mirrors the mode file; None means the
    file is absent. The PID may be stale and must be re-validated before use.
    `pid_file_present` is set whenever a PID file exists, even one whose
    content is not a PID; such a file still blocks a purge.
    """
    pid: Optional[int] = None
    mode: Optional[RunMode] = None
    pid_file_present: bool = False

    def __post_init__(self) -> None:
        if self.pid is not None:
            self.pid_file_present = True

    @property
    def mode_label(self) -> str:
        return self.mode.value if self.mode else UNKNOWN_MODE

    @property
    def pid_unreadable(self) -> bool:
        return self.pid_file_present and self.pid is None

    def track(self, pid: int) -> None:
        self.pid = pid
        self.pid_file_present = True

    def clear_pid(self) -> None:
        self.pid = None
        self.pid_file_present = False


class StateStore:
    """Loads and saves a NodeState. Supervisor actions load once at entry and save before returning."""

    def load(self) -> NodeState:
        raise NotImplementedError

    def save(self, state: NodeState) -> None:
        raise NotImplementedError


class MemoryStateStore(StateStore):
    """Keeps the state in memory. Used to drive the supervisor without touching the disk."""

    def __init__(self, pid: Optional[int] = None, mode: Optional[RunMode] = None) -> None:
        self.state = NodeState(pid, mode)

    def load(self) -> NodeState:
        return replace(self.state)

    def save(self, state: NodeState) -> None:
        self.state = replace(state)


class FileStateStore(StateStore):
    """Stores the PID and the run mode in two single-line files."""

    def __init__(self, pid_path: Path, mode_path: Path) -> None:
        self.pid_path = Path(pid_path)
        self.mode_path = Path(mode_path)

    def load(self) -> NodeState:
        present, pid = self._read_pid()
        return NodeState(pid=pid, mode=self._read_mode(), pid_file_present=present)

    def save(self, state: NodeState) -> None:
        """
        Writes the state to disk. Fields set to None remove their file, except
        that an unreadable PID file stays until an action clears it.

        :param state: The state to persist.
        """
        if state.pid is not None or not state.pid_file_present:
            self._write_or_remove(self.pid_path, None if state.pid is None else str(state.pid))
        self._write_or_remove(self.mode_path, state.mode.value if state.mode else None)

    def _read_pid(self) -> Tuple[bool, Optional[int]]:
        """Returns whether the PID file exists and the PID it holds, if it holds one."""
        if not self.pid_path.exists():
            return False, None
        try:
            pid = int(self.pid_path.read_text().strip())
            if pid <= 0:
                raise ValueError(f"non-positive PID {pid}")
            return True, pid
        except (ValueError, IOError) as e:
            log.warning(f"Unreadable PID file '{self.pid_path}' ({e}).")
            return True, None

    def _read_mode(self) -> Optional[RunMode]:
        if not self.mode_path.exists():
            return None
        try:
            token = self.mode_path.read_text().strip()
        except IOError as e:
            log.warning(f"Could not read mode file '{self.mode_path}': {e}")
            return None
        mode = RunMode.parse(token)
        if mode is None:
            log.warning(f"Mode file '{self.mode_path}' holds unknown mode '{token}'.")
        return mode

    @staticmethod
    def _write_or_remove(path: Path, content: Optional[str]) -> None:
        """Atomically replaces `path` with `content`, or removes it when content is None."""
        if content is None:
            path.unlink(missing_ok=True)
            return

        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(content + "\n")
            temp_path.replace(path)
        finally:
            temp_path.unlink(missing_ok=True)

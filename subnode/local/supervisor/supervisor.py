import os
import time
import shutil
import logging
import datetime
from pathlib import Path
from dataclasses import replace
from typing import Any, Callable, List, Optional
from subnode.local import app_settings
from . import shutdown, startup
from .errors import MissingArtifactError, PreconditionError, SupervisorError
from .node_config import parse_cpu_cores
from .persistence import FileStateStore, NodeState, StateStore
from .process_utils import ProcessControl, PsutilProcessControl
from .prompts import ConsolePrompter, Prompter, confirm, parse_positive_int

log = logging.getLogger(__name__)


def tail_lines(path: Path, count: int, block_size: int = 64 * 1024) -> List[str]:
    """
    Returns the last `count` lines of a text file, without line endings.

    Reads backwards from the end in blocks, so the cost depends on the lines
    returned and not on the size of the node log.
    """
    with path.open("rb") as f:
        position = f.seek(0, os.SEEK_END)
        data = b""
        # One newline more than requested guarantees the first kept line is whole.
        while position > 0 and data.count(b"\n") <= count:
            size = min(block_size, position)
            position -= size
            f.seek(position)
            data = f.read(size) + data

    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [line.decode("utf-8", errors="replace") for line in lines[-count:]]


class NodeSupervisor:
    """
    Manages the lifecycle of the Subtensor node process.

    Every public action loads the persisted NodeState, runs to completion, and
    saves the state again if it changed. Actions return True on success and
    False on a reported failure.
    """

    def __init__(
        self,
        settings: Any = None,
        store: Optional[StateStore] = None,
        process_control: Optional[ProcessControl] = None,
        prompter: Optional[Prompter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initializes the supervisor with its collaborators, defaulting to the real ones."""
        self.settings = settings or app_settings
        self.store = store or FileStateStore(self.settings.PID_FILE, self.settings.MODE_FILE)
        self.process_control = process_control or PsutilProcessControl()
        self.prompter = prompter or ConsolePrompter()
        self.sleep = sleep

    def _run(self, name: str, action: Callable[[NodeState], None]) -> bool:
        """
        Runs one action against freshly loaded state and persists any change.

        :param name: The action name, for log messages.
        :param action: Callable mutating the state in place; raises SupervisorError on failure.
        :return: True if the action completed, False if it failed.
        """
        state = self.store.load()
        loaded = replace(state)
        log.debug(f"Action '{name}' starting with state {state}.")
        try:
            action(state)
            return True
        except SupervisorError as e:
            log.error(str(e))
            return False
        except OSError as e:
            log.error(f"Action '{name}' failed: {e}", exc_info=True)
            return False
        finally:
            if state != loaded:
                self.store.save(state)
                log.debug(f"Saved state {state}.")

    #* --- Lifecycle ---
    def start(self) -> bool:
        """Starts the node unless it is already running."""
        return self._run("start", self._start)

    def _start(self, state: NodeState) -> None:
        if startup.check_if_already_running(self, state):
            return
        startup.ensure_node_dir(self)
        config = startup.prompt_node_config(self, state.mode)
        state.track(startup.launch_node(self, config, state.mode))
        state.mode = config.mode

    def stop(self) -> bool:
        """Stops the node gracefully, escalating to SIGKILL after the timeout."""
        return self._run("stop", self._stop)

    def _stop(self, state: NodeState) -> None:
        if state.pid_unreadable:
            log.info("Unreadable PID file found; removing.")
            state.clear_pid()
            return
        if state.pid is None:
            log.info("Node not running (no PID file).")
            return
        if not self.process_control.is_alive(state.pid):
            log.info("Stale PID file found; removing.")
            state.clear_pid()
            return

        log.info(f"Stopping Subtensor node (PID: {state.pid})...")
        shutdown.graceful_shutdown_sequence(self, state.pid)
        state.clear_pid()
        log.info("Node stopped.")

    def restart(self) -> bool:
        """Stops the node, then starts it once the PID file has been released."""
        if not self.stop():
            log.error("Restart aborted: the node could not be stopped.")
            return False
        return self.start()

    def status(self) -> bool:
        """Reports whether the node is running, with its mode and the tail of its log."""
        return self._run("status", self._status)

    def _status(self, state: NodeState) -> None:
        if state.pid_unreadable:
            print("Unreadable PID file; node not tracked. Removing PID file.")
            state.clear_pid()
        if state.pid is None:
            print(f"Node is not running. Last mode: {state.mode_label}")
            return
        if not self.process_control.is_alive(state.pid):
            print("Stale PID file; node not running. Removing PID file.")
            state.clear_pid()
            return

        print(f"Node running (PID: {state.pid}). Mode: {state.mode_label}")
        stats = self.process_control.stats(state.pid)
        if stats is not None:
            uptime = datetime.timedelta(seconds=int(stats.uptime_seconds))
            print(f"CPU: {stats.cpu_percent:.1f}% | MEM: {stats.rss_bytes / 1024 / 1024:.1f} MB | Uptime: {uptime}")

        lines = self.settings.STATUS_TAIL_LINES
        print(f"Log tail (last {lines} lines):")
        try:
            for line in tail_lines(self.settings.LOG_FILE, lines):
                print(line)
        except OSError as e:
            log.debug(f"Log tail unavailable: {e}")

    #* --- Maintenance ---
    def purge(self) -> bool:
        """Deletes the node database after confirmation. Refuses while a PID file exists."""
        return self._run("purge", self._purge)

    def _purge(self, state: NodeState) -> None:
        if state.pid_file_present:
            raise PreconditionError("Stop the node first with 'stop' before purging.")

        db_path = self.settings.DB_PATH
        question = (
            f"Are you sure you want to delete the database at {db_path}? "
            "This requires a full resync and can take a long time."
        )
        if not confirm(self.prompter, question):
            log.info("Purge cancelled.")
            return

        log.info(f"Purging DB at {db_path}...")
        if db_path.exists():
            shutil.rmtree(db_path)
        else:
            log.info(f"No database found at {db_path}.")
        state.mode = None
        log.info("Database purged. Start the node in desired mode now.")

    def view_logs(self, lines: Optional[str] = None) -> bool:
        """
        Prints the last lines of the node log.

        :param lines: The requested line count as typed; None asks for it.
        """
        return self._run("view_logs", lambda state: self._view_logs(lines))

    def _view_logs(self, lines: Optional[str]) -> None:
        log_file = self._require_log_file()
        default = self.settings.DEFAULT_VIEW_LINES
        if lines is None:
            lines = self.prompter.ask(f"How many lines do you want to view? (default {default})")
        count = parse_positive_int(lines or "") or default

        print(f"---- Last {count} lines from {log_file} ----")
        for line in tail_lines(log_file, count):
            print(line)
        print("---- end logs ----")

    def purge_logs(self) -> bool:
        """Truncates the node log after confirmation."""
        return self._run("purge_logs", lambda state: self._purge_logs())

    def _purge_logs(self) -> None:
        log_file = self._require_log_file()
        if not confirm(self.prompter, f"Are you sure you want to clear the log file at {log_file}?"):
            log.info("Log purge cancelled.")
            return
        with log_file.open("r+") as f:
            f.truncate(0)
        log.info("Log file purged.")

    def _require_log_file(self) -> Path:
        log_file = self.settings.LOG_FILE
        if not log_file.is_file():
            raise MissingArtifactError(f"Log file does not exist: {log_file}")
        return log_file

    def check_config(self) -> bool:
        """
        Validates the installation paths and CPU pinning settings.

        :return: True if every check passed, otherwise False.
        """
        log.info("Performing configuration and path validation...")
        settings = self.settings
        all_ok = True
        checks = {
            f"Node directory '{settings.NODE_DIR}'": settings.NODE_DIR.is_dir(),
            f"Node binary '{settings.NODE_BIN}'": settings.NODE_BIN.is_file(),
        }
        if settings.CPU_CORES:
            checks[f"CPU pinning tool '{settings.CPU_PIN_TOOL}'"] = shutil.which(settings.CPU_PIN_TOOL) is not None
            try:
                parse_cpu_cores(settings.CPU_CORES)
                checks[f"CPU core range '{settings.CPU_CORES}'"] = True
            except ValueError as e:
                log.error(f"CONFIG CHECK FAILED: {e}")
                checks[f"CPU core range '{settings.CPU_CORES}'"] = False

        for name, ok in checks.items():
            if ok:
                log.info(f"Config Check OK: {name}")
            else:
                log.error(f"CONFIG CHECK FAILED: {name}")
                all_ok = False
        return all_ok

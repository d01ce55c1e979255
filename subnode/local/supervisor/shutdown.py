import logging
from typing import TYPE_CHECKING
from .errors import SignalError
from .process_utils import ProcessGone

if TYPE_CHECKING:
    from .supervisor import NodeSupervisor

log = logging.getLogger(__name__)


def _wait_for_exit(manager: "NodeSupervisor", pid: int) -> bool:
    """Polls for exit, one check per interval, for the configured number of attempts."""
    settings = manager.settings
    for attempt in range(1, settings.STOP_POLL_ATTEMPTS + 1):
        if manager.process_control.wait_for_exit(pid, settings.STOP_POLL_INTERVAL):
            log.debug(f"PID {pid} exited after {attempt} check(s).")
            return True
    return False


def _forceful_kill(manager: "NodeSupervisor", pid: int) -> None:
    """Sends SIGKILL and confirms the exit."""
    log.warning(f"PID {pid} did not exit cleanly; sending KILL.")
    try:
        manager.process_control.kill(pid)
    except ProcessGone:
        return
    if not manager.process_control.wait_for_exit(pid, manager.settings.KILL_CONFIRM_TIMEOUT):
        raise SignalError(f"PID {pid} is still alive after SIGKILL; keeping its PID file.")


def graceful_shutdown_sequence(manager: "NodeSupervisor", pid: int) -> None:
    """
    Stops the node: SIGTERM, bounded wait, then SIGKILL if it is still alive.

    Returns only once the process is confirmed gone.

    :param manager: The NodeSupervisor instance.
    :param pid: The PID of the live node.
    :raises SignalError: If the process cannot be signalled or survives SIGKILL.
    """
    try:
        manager.process_control.terminate(pid)
    except ProcessGone:
        log.debug(f"PID {pid} exited before SIGTERM was sent.")
        return

    if not _wait_for_exit(manager, pid):
        _forceful_kill(manager, pid)

import logging
from typing import TYPE_CHECKING, Optional
from .errors import DirectoryUnreachableError, LaunchFailedError
from .node_config import NodeConfig, RunMode
from .persistence import NodeState
from .prompts import ask_positive_int

if TYPE_CHECKING:
    from .supervisor import NodeSupervisor

log = logging.getLogger(__name__)

MODE_CHOICES = "/".join(mode.value for mode in RunMode)


def check_if_already_running(manager: "NodeSupervisor", state: NodeState) -> bool:
    """
    Checks whether the recorded PID is a live process, clearing it if it is stale.

    :param manager: The NodeSupervisor instance.
    :param state: The loaded node state; its PID is cleared when stale.
    :return: True if the node is already running, False otherwise.
    """
    if state.pid_unreadable:
        log.info("Removing unreadable PID file.")
        state.clear_pid()
    if state.pid is None:
        return False
    if manager.process_control.is_alive(state.pid):
        log.info(f"Node already appears to be running (PID: {state.pid}).")
        return True
    log.info(f"Removing stale PID file (PID {state.pid} is not running).")
    state.clear_pid()
    return False


def ensure_node_dir(manager: "NodeSupervisor") -> None:
    """Raises DirectoryUnreachableError if the installation directory cannot be used as the working directory."""
    node_dir = manager.settings.NODE_DIR
    if not node_dir.is_dir():
        raise DirectoryUnreachableError(f"Cannot enter node directory '{node_dir}'.")


def prompt_mode(manager: "NodeSupervisor") -> RunMode:
    """Asks for the run mode until a valid one is given."""
    while True:
        mode = RunMode.parse(manager.prompter.ask(f"What mode do you want the node to run in? ({MODE_CHOICES})"))
        if mode is not None:
            return mode
        print(f"Invalid input. Please enter {', '.join(repr(m.value) for m in RunMode)}.")


def prompt_node_config(manager: "NodeSupervisor", last_mode: Optional[RunMode]) -> NodeConfig:
    """
    Interactively builds the configuration for the next start.

    Lite and full modes ask for the block retention; archive keeps everything.
    Warnings about database compatibility are advisory and never block the start.

    :param manager: The NodeSupervisor instance.
    :param last_mode: The mode recorded by the previous successful start, if any.
    :return: The node configuration to launch.
    """
    mode = prompt_mode(manager)
    default_blocks = manager.settings.DEFAULT_BLOCKS

    if mode is RunMode.ARCHIVE:
        log.warning(
            "Archive requires a fresh DB and large disk (~2TB+). "
            "If you previously ran lite/full, you should purge the DB first."
        )
        return NodeConfig.for_mode(mode, manager.settings)

    if mode is RunMode.LITE:
        question = "How many blocks to retain after promotion to full?"
    else:
        question = "How many blocks do you want to retain?"
    blocks = ask_positive_int(manager.prompter, question, default_blocks)

    if last_mode is RunMode.ARCHIVE:
        log.warning(
            f"Switching from archive to {mode.value} often requires a DB purge. "
            "If you see DB incompatibility errors, run 'purge'."
        )
    return NodeConfig.for_mode(mode, manager.settings, blocks)


def launch_node(manager: "NodeSupervisor", config: NodeConfig, last_mode: Optional[RunMode]) -> int:
    """
    Launches the node and confirms it survived the grace period.

    :param manager: The NodeSupervisor instance.
    :param config: The configuration to launch.
    :param last_mode: The previously recorded mode, used to word the failure hint.
    :return: The PID of the confirmed-alive node.
    :raises LaunchFailedError: If the node could not be spawned or died during the grace period.
    """
    settings = manager.settings
    log.info(f"Starting Subtensor node in mode: {config.mode.value}")
    log.info(f"Node command: {' '.join(config.command())}")

    pid = manager.process_control.spawn(config.launch_args(), settings.NODE_DIR, settings.LOG_FILE)
    log.debug(f"Spawned node with PID {pid}; waiting {settings.START_GRACE_PERIOD}s before checking it.")
    manager.sleep(settings.START_GRACE_PERIOD)

    if not manager.process_control.is_alive(pid):
        message = f"Node failed to start. Check {settings.LOG_FILE} for errors."
        if last_mode is not None and last_mode is not config.mode:
            message += (
                f" The mode changed from {last_mode.value} to {config.mode.value}; "
                "the DB may be incompatible - consider running 'purge'."
            )
        raise LaunchFailedError(message)

    pinning = f" (pinned to cores {config.cpu_cores})" if config.cpu_cores else ""
    log.info(f"Node started with PID {pid}{pinning}. Logs: {settings.LOG_FILE}")
    return pid

import logging
from typing import Callable, Dict, List
from subnode.local.supervisor import NodeSupervisor
from subnode.local.console.handler import ACTION_HELP, print_usage

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1


def _command_map(supervisor: NodeSupervisor, args: List[str]) -> Dict[str, Callable[[], bool]]:
    return {
        "start": supervisor.start,
        "stop": supervisor.stop,
        "status": supervisor.status,
        "restart": supervisor.restart,
        "purge": supervisor.purge,
        "view_logs": lambda: supervisor.view_logs(args[0] if args else None),
        "purge_logs": supervisor.purge_logs,
        "check_config": supervisor.check_config,
    }


ACTIONS = tuple(ACTION_HELP)


def execute_command(supervisor: NodeSupervisor, command: str, args: List[str], program: str = "subnode") -> int:
    """
    Executes a single action against the supervisor.

    An action reports its own failures; only an unrecognized command changes
    the exit status.

    :param supervisor: The NodeSupervisor instance.
    :param command: The action name (e.g., 'start', 'view_logs').
    :param args: Extra arguments for the action.
    :param program: Program name used in the usage text.
    :return: The process exit status.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = _command_map(supervisor, args)

    if command not in command_map:
        print_usage(program)
        return EXIT_USAGE

    if not command_map[command]():
        log.debug(f"Action '{command}' reported a failure.")
    return EXIT_OK

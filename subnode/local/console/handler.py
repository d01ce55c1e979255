import logging
from typing import Dict

log = logging.getLogger(__name__)

ACTION_HELP: Dict[str, str] = {
    "start": "Start the node (asks for lite/full/archive mode).",
    "stop": "Stop the node gracefully, killing it after the timeout.",
    "status": "Show whether the node is running, its mode, and the log tail.",
    "restart": "Stop and then start the node.",
    "purge": "Delete the node database (node must be stopped).",
    "view_logs": "Show the last N lines of the node log.",
    "purge_logs": "Clear the node log file.",
    "check_config": "Validate the node paths and CPU pinning settings.",
}


def action_choices() -> str:
    """Returns the action list in `{a|b|c}` form."""
    return "{" + "|".join(ACTION_HELP) + "}"


def print_usage(program: str = "subnode") -> None:
    """Prints the one-line usage text followed by a short description of each action."""
    print(f"Usage: {program} {action_choices()} [--verbose]")
    print()
    for action, description in ACTION_HELP.items():
        print(f"  {action:<14} - {description}")
    print()
    print("  view_logs accepts the line count as an extra argument, e.g. 'view_logs 50'.")

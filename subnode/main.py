import sys
import logging
from typing import List, Optional

import setproctitle

from subnode.local import app_settings
from subnode.log.setup import setup_logging
from subnode.local.console import execute_command
from subnode.local.console.handler import action_choices
from subnode.local.supervisor import NodeSupervisor


def main(argv: Optional[List[str]] = None, supervisor: Optional[NodeSupervisor] = None) -> int:
    """
    The main entry point for the node manager.

    :param argv: Command-line arguments without the program name; defaults to sys.argv[1:].
    :param supervisor: The supervisor to drive; a default one is built when omitted.
    :return: The process exit status.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = "--verbose" in args
    if verbose:
        args.remove("--verbose")
    setup_logging(logging.DEBUG if verbose else logging.INFO)

    supervisor = supervisor or NodeSupervisor()

    if args:
        command, args = args[0], args[1:]
    else:
        # Interactive mode: ask for the action
        command = supervisor.prompter.ask(f"What action do you want to perform? {action_choices()}")

    return execute_command(supervisor, command, args)


def run() -> None:
    """Console script entry point."""
    setproctitle.setproctitle(app_settings.PROCESS_TITLE)
    sys.exit(main())


if __name__ == "__main__":
    run()

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

log = logging.getLogger(__name__)

ARCHIVE_PRUNING = "archive"


class RunMode(str, enum.Enum):
    """Operating profile of the node. The value is the token stored in the mode file."""
    LITE = "lite"
    FULL = "full"
    ARCHIVE = "archive"

    @classmethod
    def parse(cls, token: Optional[str]) -> Optional["RunMode"]:
        """Returns the mode named by `token`, or None if it names no mode."""
        if token is None:
            return None
        try:
            return cls(token.strip().lower())
        except ValueError:
            return None

    @property
    def sync_strategy(self) -> str:
        # Lite nodes warp sync and then keep following the chain as a full node.
        return "warp" if self is RunMode.LITE else "full"

    @property
    def is_pruned(self) -> bool:
        return self is not RunMode.ARCHIVE


def parse_cpu_cores(cores_list: str) -> List[int]:
    """
    Expands a taskset-style core list such as "0-5" or "0,2,4-6".

    :param cores_list: The core list string.
    :return: The sorted list of core indices.
    :raises ValueError: If the string is empty or malformed.
    """
    cores = set()
    for part in cores_list.split(","):
        part = part.strip()
        if not part:
            raise ValueError(f"Empty entry in CPU core list '{cores_list}'")
        if "-" in part:
            low, _, high = part.partition("-")
            first, last = int(low), int(high)
            if first > last:
                raise ValueError(f"Descending CPU core range '{part}'")
            cores.update(range(first, last + 1))
        else:
            cores.add(int(part))
    if any(core < 0 for core in cores):
        raise ValueError(f"Negative CPU core in '{cores_list}'")
    return sorted(cores)


@dataclass(frozen=True)
class NodeConfig:
    """
    The command line of one node start, derived from a RunMode.

    Built once per start and never modified afterwards.
    """
    mode: RunMode
    base_command: Tuple[str, ...]
    sync: str
    pruning: Union[int, str]
    node_name: str
    cpu_cores: str = ""
    pin_tool: str = "taskset"

    @classmethod
    def for_mode(cls, mode: RunMode, settings: Any, blocks: Optional[int] = None) -> "NodeConfig":
        """
        Derives the node configuration for a mode.

        :param mode: The requested run mode.
        :param settings: The effective settings.
        :param blocks: Block retention for lite/full; None means the default. Ignored for archive.
        :return: The immutable configuration.
        """
        if mode.is_pruned:
            pruning: Union[int, str] = blocks if blocks is not None else settings.DEFAULT_BLOCKS
        else:
            pruning = ARCHIVE_PRUNING

        return cls(
            mode=mode,
            base_command=(str(settings.NODE_BIN), *settings.BASE_FLAGS),
            sync=mode.sync_strategy,
            pruning=pruning,
            node_name=settings.NODE_NAME,
            cpu_cores=settings.CPU_CORES or "",
            pin_tool=settings.CPU_PIN_TOOL,
        )

    def command(self) -> List[str]:
        """Returns the node invocation: base command, sync and pruning flags, name."""
        return [
            *self.base_command,
            "--sync", self.sync,
            "--pruning", str(self.pruning),
            "--name", self.node_name,
        ]

    def launch_args(self) -> List[str]:
        """Returns the node invocation wrapped in the CPU pinning tool, if pinning is configured."""
        if not self.cpu_cores:
            return self.command()
        return [self.pin_tool, "-c", self.cpu_cores, *self.command()]

"""Errors raised inside supervisor actions and reported by the action that ran them."""


class SupervisorError(Exception):
    """Base class for failures that abort a supervisor action."""


class DirectoryUnreachableError(SupervisorError):
    """The node installation directory does not exist or is not a directory."""


class LaunchFailedError(SupervisorError):
    """The node process could not be spawned or died during the grace period."""


class PreconditionError(SupervisorError):
    """The action is not allowed in the current node state."""


class MissingArtifactError(SupervisorError):
    """A file the action works on (usually the node log) does not exist."""


class SignalError(SupervisorError):
    """A signal could not be delivered to the node process."""

"""
The Supervisor package.
Manages the lifecycle of the Subtensor node process.

This package contains the central NodeSupervisor class and its helper modules,
which together handle starting, stopping, and inspecting the node, and the
on-disk bookkeeping of its PID and run mode.
"""
from .supervisor import NodeSupervisor
from .node_config import NodeConfig, RunMode

__all__ = ['NodeSupervisor', 'NodeConfig', 'RunMode']

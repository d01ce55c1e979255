"""
This module contains the configuration settings for the subnode manager.
It defines the node installation paths, the node command line, and the timing
used when starting and stopping the node.
Values are read once at import time; the environment (or a .env file) may
override the ones marked below.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
NODE_DIR = pathlib.Path(os.getenv("SUBNODE_NODE_DIR", str(pathlib.Path.home() / "subtensor"))).expanduser()
NODE_BIN = NODE_DIR / "target" / "release" / "node-subtensor"
DATA_DIR = NODE_DIR / "data"

#* --- Bookkeeping Files ---
LOG_FILE = NODE_DIR / "subtensor.log"
PID_FILE = NODE_DIR / "subtensor.pid"
MODE_FILE = NODE_DIR / "last_mode.txt"
DB_PATH = DATA_DIR / "chains" / "bittensor" / "db" / "full"

# The manager's own action log, separate from the node output in LOG_FILE.
MANAGER_LOG_PATH = NODE_DIR / "manage_node.log"
MANAGER_LOG_MAX_BYTES = 1024 * 1024
MANAGER_LOG_BACKUP_COUNT = 3

#* --- Node Settings ---
NODE_NAME = os.getenv("SUBNODE_NODE_NAME", "subtensor-node")
CPU_CORES = os.getenv("SUBNODE_CPU_CORES", "0-5")  # empty string disables pinning
CPU_PIN_TOOL = "taskset"
DEFAULT_BLOCKS = 7200
RPC_LISTEN_ADDR = os.getenv("SUBNODE_RPC_LISTEN_ADDR", "10.2.1.103:9944")
CHAIN_SPEC = "chainspecs/raw_spec_finney.json"
BOOTNODES = [
    "/dns/bootnode.finney.chain.opentensor.ai/tcp/30333/ws/p2p/12D3KooWRwbMb85RWnT8DSXSYMWQtuDwh4LJzndoRrTDotTR5gDC",
]

# Flags passed on every start, before the mode-derived sync/pruning flags.
BASE_FLAGS = [
    "--database", "rocksdb",
    "--offchain-worker", "always",
    "--prometheus-external",
    "--base-path", str(DATA_DIR),
    "--chain", CHAIN_SPEC,
    "--no-mdns",
    "--bootnodes", *BOOTNODES,
    "--experimental-rpc-endpoint", f"listen-addr={RPC_LISTEN_ADDR}",
]

#* --- Lifecycle Timing ---
START_GRACE_PERIOD = 5      # seconds before the post-start liveness check
STOP_POLL_ATTEMPTS = 10     # exit checks after SIGTERM before SIGKILL
STOP_POLL_INTERVAL = 1      # seconds per exit check
KILL_CONFIRM_TIMEOUT = 5    # seconds to wait for exit after SIGKILL

#* --- Console Settings ---
STATUS_TAIL_LINES = 10
DEFAULT_VIEW_LINES = 100
PROCESS_TITLE = "subnode - manager"

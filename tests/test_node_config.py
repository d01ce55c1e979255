import pytest

from subnode.local.supervisor.node_config import ARCHIVE_PRUNING, NodeConfig, RunMode, parse_cpu_cores


@pytest.mark.parametrize("token, expected", [
    ("lite", RunMode.LITE),
    (" FULL\n", RunMode.FULL),
    ("archive", RunMode.ARCHIVE),
    ("warp", None),
    ("", None),
    (None, None),
])
def test_run_mode_parse(token, expected):
    assert RunMode.parse(token) is expected


def test_sync_strategy_per_mode():
    assert RunMode.LITE.sync_strategy == "warp"
    assert RunMode.FULL.sync_strategy == "full"
    assert RunMode.ARCHIVE.sync_strategy == "full"


def test_lite_without_blocks_uses_default_retention(settings):
    config = NodeConfig.for_mode(RunMode.LITE, settings)
    assert config.pruning == 7200
    assert config.sync == "warp"


def test_explicit_retention_is_used(settings):
    config = NodeConfig.for_mode(RunMode.FULL, settings, blocks=1000)
    assert config.pruning == 1000


def test_archive_ignores_retention(settings):
    config = NodeConfig.for_mode(RunMode.ARCHIVE, settings, blocks=1000)
    assert config.pruning == ARCHIVE_PRUNING
    assert config.sync == "full"


def test_command_appends_mode_flags_and_name(settings):
    config = NodeConfig.for_mode(RunMode.FULL, settings, blocks=1000)
    assert config.command() == [
        str(settings.NODE_BIN), "--database", "rocksdb", "--no-mdns",
        "--sync", "full", "--pruning", "1000", "--name", "subtensor-node",
    ]


def test_launch_args_pin_to_cpu_cores(settings):
    config = NodeConfig.for_mode(RunMode.LITE, settings)
    args = config.launch_args()
    assert args[:3] == ["taskset", "-c", "0-5"]
    assert args[3:] == config.command()


def test_launch_args_without_pinning(settings):
    settings.CPU_CORES = ""
    config = NodeConfig.for_mode(RunMode.LITE, settings)
    assert config.launch_args() == config.command()


def test_config_is_immutable(settings):
    config = NodeConfig.for_mode(RunMode.LITE, settings)
    with pytest.raises(AttributeError):
        config.pruning = 1


@pytest.mark.parametrize("spec, expected", [
    ("0-5", [0, 1, 2, 3, 4, 5]),
    ("3", [3]),
    ("0,2,4-6", [0, 2, 4, 5, 6]),
    ("1-2,2-3", [1, 2, 3]),
])
def test_parse_cpu_cores(spec, expected):
    assert parse_cpu_cores(spec) == expected


@pytest.mark.parametrize("spec", ["", "a-b", "5-2", "1,,2", "-1"])
def test_parse_cpu_cores_rejects_malformed(spec):
    with pytest.raises(ValueError):
        parse_cpu_cores(spec)

import pytest
from kvprobe.exceptions import ConnectionError, UsageError
from kvprobe.monitor.registry import TargetRegistry, build_targets

def test_empty_descriptor_list_is_usage_error(logger, fake_factory):
    with pytest.raises(UsageError) as excinfo:
        build_targets([], logger, fake_factory)

    assert "Usage" in str(excinfo.value)
    assert fake_factory.created == []

def test_targets_keep_descriptor_order(logger, fake_factory):
    registry = build_targets(["c:1", "a:2", "b:3"], logger, fake_factory)

    assert isinstance(registry, TargetRegistry)
    assert len(registry) == 3
    assert registry.identifiers == ("c:1", "a:2", "b:3")
    assert [t.index for t in registry] == [0, 1, 2]
    assert all(t.connector.connected for t in registry)

def test_each_target_is_announced(logger, log_stream, fake_factory):
    build_targets(["cache-a:6379", "cache-b:6379"], logger, fake_factory)

    lines = log_stream.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("INFO  kvprobe.test - Monitoring: cache-a:6379")
    assert lines[1].endswith("INFO  kvprobe.test - Monitoring: cache-b:6379")

def test_connect_failure_propagates_and_closes_opened(logger, fake_factory):
    fake_factory.script["down:6379"] = {"fail_connect": ConnectionError("Failed to connect to down:6379")}

    with pytest.raises(ConnectionError):
        build_targets(["up:6379", "down:6379", "never:6379"], logger, fake_factory)

    first, second = fake_factory.created
    assert first.closed
    assert second.descriptor == "down:6379"
    # never:6379 was not attempted
    assert len(fake_factory.created) == 2

def test_identifier_is_read_only(logger, fake_factory):
    registry = build_targets(["a:1"], logger, fake_factory)

    with pytest.raises(AttributeError):
        registry[0].identifier = "b:2"

def test_close_releases_every_connector(logger, fake_factory):
    registry = build_targets(["a:1", "b:2"], logger, fake_factory)
    registry.close()

    assert all(c.closed for c in fake_factory.created)

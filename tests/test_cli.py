import pytest

from bucket_deleter import cli
from bucket_deleter.config import DeleterConfig
from bucket_deleter.errors import ConfigError
from bucket_deleter.gate import ConfirmationGate

from conftest import FakeGateway, ScriptedAnswers, make_pages


@pytest.fixture
def wire(monkeypatch):
    def _wire(gateway, *answers):
        monkeypatch.setattr(cli, "S3Gateway", lambda config: gateway)
        monkeypatch.setattr(
            cli, "ConfirmationGate", lambda: ConfirmationGate(ScriptedAnswers(*answers))
        )
        return gateway

    return _wire


def test_defaults():
    args = cli.parse_arguments([])
    config = DeleterConfig.from_arguments(args)

    assert config.region == "us-west-2"
    assert config.profile == "default"
    assert config.max_workers == 10
    assert config.page_size == 1000
    assert config.endpoint_url is None
    assert not args.verbose


def test_arguments_reach_config():
    args = cli.parse_arguments(
        ["--region", "eu-west-1", "--profile", "ops", "-w", "4", "--page-size", "50"]
    )
    config = DeleterConfig.from_arguments(args)

    assert (config.region, config.profile, config.max_workers, config.page_size) == (
        "eu-west-1",
        "ops",
        4,
        50,
    )


@pytest.mark.parametrize(
    "kwargs", [{"max_workers": 0}, {"page_size": 0}, {"page_size": 1001}, {"max_retries": -1}]
)
def test_invalid_config(kwargs):
    with pytest.raises(ConfigError):
        DeleterConfig(**kwargs)


def test_pool_grows_with_workers():
    assert DeleterConfig(max_workers=64).connection_pool_size == 64
    assert DeleterConfig(max_workers=4).connection_pool_size == 20


def test_exit_zero_when_buckets_processed(wire):
    gateway = wire(FakeGateway({"logs": make_pages("logs", 3), "keep": []}), "y", "y", "n")

    assert cli.main([]) == 0
    assert gateway.removed == ["logs"]


def test_exit_zero_despite_per_bucket_failures(wire):
    gateway = FakeGateway({"logs": make_pages("logs", 3, 3)})
    gateway.page_failures = {("logs", 1)}
    wire(gateway, "y", "y")

    assert cli.main([]) == 0
    assert gateway.removed == []


def test_exit_one_when_listing_fails(wire):
    gateway = FakeGateway({"logs": []})
    gateway.fail_listing = True
    wire(gateway)

    assert cli.main([]) == 1


def test_invalid_workers_exit_two(wire):
    wire(FakeGateway())
    assert cli.main(["--workers", "0"]) == 2


def test_interrupt_exits_one(monkeypatch):
    def interrupt(prompt):
        raise KeyboardInterrupt

    gateway = FakeGateway({"logs": make_pages("logs", 2)})
    monkeypatch.setattr(cli, "S3Gateway", lambda config: gateway)
    monkeypatch.setattr(cli, "ConfirmationGate", lambda: ConfirmationGate(interrupt))

    assert cli.main([]) == 1
    assert gateway.delete_calls == []
    assert gateway.removed == []

import pytest

import main
from core import NukeApp
from helpers.config_loader import get_config
from helpers.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path):
    config = get_config(str(tmp_path / "nope.yml"))
    assert config["s3"] == {}
    assert config["nuke"]["concurrency"] == 10
    assert config["nuke"]["queue-size"] == 10000
    assert config["debug"] is False


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        "s3:\n"
        "  endpoint: http://localhost:9000\n"
        "  location: eu-central-1\n"
        "nuke:\n"
        "  concurrency: 32\n"
        "debug: true\n"
    )
    config = get_config(str(path))
    assert config["s3"]["endpoint"] == "http://localhost:9000"
    assert config["nuke"]["concurrency"] == 32
    assert config["nuke"]["queue-size"] == 10000
    assert config["debug"] is True


def test_empty_file(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("")
    assert get_config(str(path))["nuke"]["concurrency"] == 10


def test_app_init_uses_config():
    config = get_config("does-not-exist.yml")
    config["s3"]["endpoint"] = "http://localhost:4566"
    config["s3"]["location"] = "us-west-2"
    app = NukeApp(config)
    app.init()

    s3 = app.s3_service_getter()
    assert s3.endpoint_url == "http://localhost:4566"
    assert s3.region == "us-west-2"
    assert app.s3_service_getter("ap-south-1").region == "ap-south-1"


def test_service_getter_requires_init():
    app = NukeApp(get_config("does-not-exist.yml"))
    with pytest.raises(RuntimeError):
        app.s3_service_getter()


def test_pipeline_config_cli_override():
    app = NukeApp(get_config("does-not-exist.yml"))
    assert app.pipeline_config("testbucket").concurrency == 10
    assert app.pipeline_config("testbucket", 3).concurrency == 3


def test_pipeline_config_rejects_bad_values():
    app = NukeApp(get_config("does-not-exist.yml"))
    with pytest.raises(ConfigError):
        app.pipeline_config("testbucket", 0)
    with pytest.raises(ConfigError):
        app.pipeline_config("")


@pytest.mark.parametrize(
    "content",
    ["- just\n- a list\n", "nuke: 5\n", "s3: [a, b]\n", "plain string\n"],
)
def test_malformed_file_raises_config_error(tmp_path, content):
    path = tmp_path / "config.yml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        get_config(str(path))


def test_malformed_file_exits_cleanly(tmp_path, capsys):
    path = tmp_path / "config.yml"
    path.write_text("- just\n- a list\n")
    assert main.main(["--config", str(path), "--bucket", "b", "--yes"]) == 1
    assert "[ERROR]" in capsys.readouterr().out

import textwrap

import pytest

from salvo.actions import HttpPostAction, RServeAction
from salvo.config import load_config, parse_config
from salvo.errors import ConfigError


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def test_load_config_keeps_file_order(tmp_path):
    path = write(
        tmp_path,
        """
        search:
          http_post:
            host: http://localhost:8000
            path: /api/search
            data: q=load
        model:
          rserve:
            host: localhost
            port: 6311
            data: summary(rnorm(10))
        """,
    )
    samplers = load_config(path, timeout_s=5.0, fail_fast=True)

    assert [s.name for s in samplers] == ["search", "model"]
    http, rserve = samplers[0].action, samplers[1].action
    assert isinstance(http, HttpPostAction)
    assert http.url == "http://localhost:8000/api/search"
    assert http.data == "q=load"
    assert http.timeout_s == 5.0 and http.fail_fast
    assert isinstance(rserve, RServeAction)
    assert (rserve.host, rserve.port, rserve.data) == ("localhost", 6311, "summary(rnorm(10))")


def test_http_post_defaults():
    (sampler,) = parse_config({"ping": {"http_post": {"host": "http://h"}}})
    assert sampler.action.url == "http://h"
    assert sampler.action.data == ""


def test_empty_file_has_no_samplers(tmp_path):
    assert load_config(write(tmp_path, "")) == []


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write(tmp_path, "a: [unclosed\n"))


@pytest.mark.parametrize(
    "data",
    [
        ["not", "a", "mapping"],
        {"s": "http_post"},
        {"s": {}},
        {"s": {"grpc": {"host": "h"}}},
        {"s": {"http_post": {"host": "http://h"}, "rserve": {"host": "h", "port": 1, "data": "1"}}},
        {"s": {"http_post": "http://h"}},
        {"s": {"http_post": {"path": "/x"}}},
        {"s": {"rserve": {"host": "h", "port": "6311", "data": "1"}}},
        {"s": {"rserve": {"host": "h", "port": True, "data": "1"}}},
        {"s": {"rserve": {"host": "h", "port": 6311}}},
    ],
)
def test_malformed_config(data):
    with pytest.raises(ConfigError):
        parse_config(data)


def test_duplicate_sampler_name(tmp_path):
    path = write(
        tmp_path,
        """
        search:
          http_post:
            host: http://localhost:8000
        search:
          http_post:
            host: http://localhost:9000
        """,
    )
    with pytest.raises(ConfigError, match="duplicate key 'search'"):
        load_config(path)


def test_duplicate_backend_key(tmp_path):
    path = write(
        tmp_path,
        """
        model:
          rserve:
            host: localhost
            port: 6311
            port: 6312
            data: "1"
        """,
    )
    with pytest.raises(ConfigError):
        load_config(path)

"""Sampler configuration.

The file maps each sampler name to exactly one backend descriptor::

    search:
      http_post:
        host: http://localhost:8000
        path: /api/search
        data: q=load

    model:
      rserve:
        host: localhost
        port: 6311
        data: summary(rnorm(1000))
"""

import logging
from collections.abc import Callable, Hashable
from pathlib import Path
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .actions import Action, HttpPostAction, RServeAction
from .errors import ConfigError
from .models import Sampler

logger = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects a key repeated within one mapping."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    continue
                if key in seen:
                    raise ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key {key!r}",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _require(name: str, kind: str, spec: dict, key: str, types, default: Any = ...) -> Any:
    if key not in spec:
        if default is ...:
            raise ConfigError(f"Sampler {name!r}: {kind} is missing required key {key!r}")
        return default
    value = spec[key]
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigError(
            f"Sampler {name!r}: {kind}.{key} has invalid value {value!r}"
        )
    return value


def _build_http_post(name: str, spec: dict, options: dict) -> Action:
    return HttpPostAction(
        host=_require(name, "http_post", spec, "host", str),
        path=_require(name, "http_post", spec, "path", str, default=""),
        data=_require(name, "http_post", spec, "data", str, default=""),
        timeout_s=options.get("timeout_s", 30.0),
        fail_fast=options.get("fail_fast", False),
    )


def _build_rserve(name: str, spec: dict, options: dict) -> Action:
    return RServeAction(
        host=_require(name, "rserve", spec, "host", str),
        port=_require(name, "rserve", spec, "port", int),
        data=_require(name, "rserve", spec, "data", str),
    )


BUILDERS: dict[str, Callable[[str, dict, dict], Action]] = {
    "http_post": _build_http_post,
    "rserve": _build_rserve,
}


def parse_config(data: Any, **options) -> list[Sampler]:
    """Build samplers from an already-parsed YAML document, in file order."""
    if data is None:
        return []
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

    samplers: list[Sampler] = []
    for name, backends in data.items():
        name = str(name)
        if not isinstance(backends, dict) or len(backends) != 1:
            raise ConfigError(
                f"Sampler {name!r} must define exactly one of: {', '.join(BUILDERS)}"
            )
        (kind, spec), = backends.items()
        builder = BUILDERS.get(kind)
        if builder is None:
            raise ConfigError(f"Sampler {name!r}: unknown backend kind {kind!r}")
        if not isinstance(spec, dict):
            raise ConfigError(f"Sampler {name!r}: {kind} must be a mapping")
        samplers.append(Sampler(name=name, action=builder(name, spec, options)))
        logger.debug(f"Configured sampler {name} ({kind})")

    return samplers


def load_config(path: str | Path, **options) -> list[Sampler]:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f, Loader=UniqueKeyLoader)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    samplers = parse_config(data, **options)
    logger.info(f"Loaded {len(samplers)} samplers from {path}")
    return samplers

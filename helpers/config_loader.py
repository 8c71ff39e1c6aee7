import os
from typing import TypedDict

import yaml

from helpers.errors import ConfigError

ConfigTypeS3 = TypedDict(
    "ConfigTypeS3",
    {
        "endpoint": str,
        "access-key-id": str,
        "secret-access-key": str,
        "location": str,
    },
    total=False,
)

ConfigTypeNuke = TypedDict(
    "ConfigTypeNuke",
    {
        "concurrency": int,
        "queue-size": int,
        "progress": bool,
    },
    total=False,
)

ConfigType = TypedDict(
    "ConfigType",
    {
        "s3": ConfigTypeS3,
        "nuke": ConfigTypeNuke,
        "debug": bool,
    },
    total=False,
)

DEFAULT_CONFIG: ConfigType = {
    "s3": {},
    "nuke": {
        "concurrency": 10,
        "queue-size": 10000,
        "progress": True,
    },
    "debug": False,
}


def get_config(path: str = "config.yml") -> ConfigType:
    # no file is fine, credentials then come from the usual AWS env/profile chain
    config: ConfigType = {
        "s3": dict(DEFAULT_CONFIG["s3"]),
        "nuke": dict(DEFAULT_CONFIG["nuke"]),
        "debug": DEFAULT_CONFIG["debug"],
    }
    if not os.path.exists(path):
        return config

    with open(path, "r") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    for section in ("s3", "nuke"):
        values = loaded.get(section) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"{path}: section '{section}' must be a mapping")
        config[section].update(values)
    config["debug"] = bool(loaded.get("debug", config["debug"]))
    return config

# Project: aemet-climate
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The AEMET API key is NOT stored here; it is read from the AEMET_API_KEY
environment variable.
"""

import os
import tomllib
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config.toml")
API_KEY_ENV = "AEMET_API_KEY"


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing or invalid.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and fill in your stations."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    return config


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [aemet]
        stations   = [<str>, ...]   # IDEMA station codes, e.g. ["5530E"]
        start_date = <str>          # DD/MM/YYYY, first day to download

        [output]
        dir = <str>                 # where data_<station>_... folders go

        [log]
        path = <str>                # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent, or stations is
            not a non-empty list.
    """
    required = {
        "aemet": ("stations", "start_date"),
        "output": ("dir",),
        "log": ("path",),
    }
    for section, keys in required.items():
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")
        for key in keys:
            if key not in config[section]:
                raise ValueError(f"Missing required config key: [{section}].{key}")

    stations = config["aemet"]["stations"]
    if not isinstance(stations, list) or not stations:
        raise ValueError("[aemet].stations must be a non-empty list of station codes")


def get_api_key() -> str:
    """Return the AEMET API key from the environment.

    Raises:
        RuntimeError: If AEMET_API_KEY is unset or empty.
    """
    key = os.environ.get(API_KEY_ENV, "").strip()
    if not key:
        raise RuntimeError(
            f"{API_KEY_ENV} is not set. Request a key at "
            "https://opendata.aemet.es/centrodedescargas/altaUsuario and export it."
        )
    return key

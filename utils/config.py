import os
from dotenv import load_dotenv

from scopeprof.errors import ConfigError
from scopeprof.reporter import ROOT_BASES, UNITS

# environment variable -> settings key
ENV_KEYS = {
    "PROFILE_UNIT": "unit",
    "PROFILE_ROOT_BASE": "root_base",
    "PROFILE_RUNS_DIR": "runs_root",
}


def load_profiler_env():
    """Load profiler settings from environment variables (and a .env file, if any).

    Only variables that are actually set are returned, so the result can be
    layered over YAML defaults.
    """
    load_dotenv(override=True)

    return {key: os.environ[var] for var, key in ENV_KEYS.items() if os.getenv(var)}


def validate_settings(cfg: dict):
    """Raise ConfigError if the display unit or root base is unknown."""
    unit = cfg.get("unit", "ms")
    if unit not in UNITS:
        raise ConfigError(f"unit must be one of {sorted(UNITS)}, got {unit!r}")
    root_base = cfg.get("root_base", "roots")
    if root_base not in ROOT_BASES:
        raise ConfigError(f"root_base must be one of {ROOT_BASES}, got {root_base!r}")
    for key in ("frames", "report_every"):
        if key in cfg and int(cfg[key]) < 0:
            raise ConfigError(f"{key} must be >= 0, got {cfg[key]!r}")
    return cfg

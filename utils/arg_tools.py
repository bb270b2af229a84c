import argparse
import os
import sys
from types import SimpleNamespace
from typing import Optional

import yaml

BASE_CONFIG = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                           "configs", "base.yaml")


def load_config(config_path: Optional[str] = None, base_path: str = BASE_CONFIG):
    """
    Load settings from the base YAML file plus an optional override file.
    """
    cfg = {}

    # base defaults
    with open(base_path) as f:
        cfg.update(yaml.safe_load(f) or {})

    # config overrides
    if config_path:
        with open(config_path) as f:
            cfg.update(yaml.safe_load(f) or {})

    return cfg

def merge_cli(
        cfg: dict,
        cli: argparse.Namespace,
        extra_cli: list[str],
        argv: list[str] | None = None) -> SimpleNamespace:
    """
    Layer command-line values over *cfg* and return them as a namespace.

    A known flag only replaces a YAML/env value when it was typed on the
    command line, so argparse defaults never shadow the config files. Extra
    `--key value` / `--key=value` pairs are YAML-parsed and win over both;
    a bare extra `--key` becomes ``True``. *cfg* itself is left untouched.
    """
    typed = _explicit_cli_keys(sys.argv[1:] if argv is None else argv)

    settings = dict(cfg)
    settings.update({k: v for k, v in vars(cli).items() if k in typed or k not in settings})
    settings.update(_parse_extra_flags(extra_cli))
    return SimpleNamespace(**settings)

def _parse_extra_flags(tokens: list[str]) -> dict:
    """Turn ["--render_ms", "5", "--physics_every=3", "--quiet"] into a dict."""
    flags: dict = {}
    key = None
    for tok in tokens:
        if tok.startswith("--"):
            key, sep, raw = tok[2:].partition("=")
            flags[key] = yaml.safe_load(raw) if sep else True
            if sep:
                key = None
        elif key is not None:
            flags[key] = yaml.safe_load(tok)
            key = None
    return flags

def _explicit_cli_keys(argv: list[str]) -> set[str]:
    """Names of the `--flags` that actually appeared in *argv*."""
    return {tok[2:].partition("=")[0] for tok in argv if tok.startswith("--")}

import os
import sys

import pytest

import scopeprof
import demo


@pytest.fixture
def fast_argv(monkeypatch):
    for var in ("PROFILE_UNIT", "PROFILE_ROOT_BASE", "PROFILE_RUNS_DIR"):
        monkeypatch.delenv(var, raising=False)

    def _set(*extra):
        monkeypatch.setattr(sys, "argv", [
            "demo.py", "--frames", "4",
            "--render_ms", "0", "--physics_ms", "0", "--collisions_ms", "0",
            "--physics_every", "2", *extra])
    return _set


def test_parse_args_layers_yaml_and_cli(fast_argv):
    fast_argv("--unit", "us")
    args = demo.parse_args()
    assert args.frames == 4
    assert args.unit == "us"
    assert args.root_base == "roots"   # from configs/base.yaml
    assert args.physics_every == 2     # unknown flag parsed as YAML

def test_demo_prints_tree(fast_argv, capsys):
    fast_argv()
    demo.main()
    out = capsys.readouterr().out
    names = [line.split(":")[0] for line in out.splitlines() if line.strip()]
    assert names == ["frame", "  physics", "    collisions", "  render"]

    metrics = {m.path: m for m in scopeprof.report()}
    assert metrics["frame"].count == 4
    assert metrics["frame/physics"].count == 2
    assert metrics["frame/render"].count == 4

def test_demo_writes_csv(fast_argv, tmp_path, capsys):
    fast_argv("--save_csv", "--report_every", "2", "--runs_root", str(tmp_path), "--run_name", "smoke")
    demo.main()
    assert os.path.exists(tmp_path / "smoke" / "profile.csv")

import argparse
import sys
import time

import scopeprof
from scopeprof.reporter import ROOT_BASES, UNITS
from utils.arg_tools import load_config, merge_cli
from utils.config import load_profiler_env, validate_settings
from utils.logger import ProfileLogger


def parse_args():
    """
    CLI for the demo frame loop.
    Defaults come from configs/base.yaml, then the environment, and can be
    overridden via CLI (including unknown `--key value` pairs).
    """
    p = argparse.ArgumentParser("Profile a simulated game loop.")
    p.add_argument("--config", type=str, default=None,
                   help="Optional YAML file with overrides")
    p.add_argument("--run_name", type=str, default="demo",
                   help="Run name for logging")
    p.add_argument("--frames", type=int, default=100,
                   help="Number of frames to simulate")
    p.add_argument("--report_every", type=int, default=0,
                   help="Frames between intermediate reports (0 = end only)")

    # reporting
    p.add_argument("--unit", choices=sorted(UNITS), default="ms",
                   help="Display unit for durations")
    p.add_argument("--root_base", choices=ROOT_BASES, default="roots",
                   help="Reference duration for top-level percentages")
    p.add_argument("--save_csv", action="store_true", default=False,
                   help="Write every report to <run dir>/profile.csv")
    p.add_argument("--use_tensorboard", action="store_true", default=False,
                   help="Write per-scope scalars to TensorBoard")

    cli, unknown_cli = p.parse_known_args()
    cfg = load_config(cli.config)
    cfg.update(load_profiler_env())
    args = merge_cli(cfg, cli, unknown_cli)
    validate_settings(vars(args))
    return args


def render(args):
    with scopeprof.profile("render"):
        time.sleep(args.render_ms / 1000.0)


def run_frame(i, args):
    with scopeprof.profile("frame"):
        # physics doesn't run every frame
        if args.physics_every and i % args.physics_every == 0:
            with scopeprof.profile("physics"):
                time.sleep(args.physics_ms / 1000.0)
                with scopeprof.profile("collisions"):
                    time.sleep(args.collisions_ms / 1000.0)

        render(args)


def main():
    args = parse_args()
    logger = None
    if args.save_csv or args.use_tensorboard:
        logger = ProfileLogger(
            run_name=args.run_name,
            runs_root=getattr(args, "runs_root", None),
            save_csv=args.save_csv,
            use_tensorboard=args.use_tensorboard,
            config=vars(args))

    report_kwargs = dict(unit=args.unit, root_base=args.root_base)
    try:
        for i in range(args.frames):
            run_frame(i, args)

            if args.report_every and (i + 1) % args.report_every == 0:
                metrics = scopeprof.report(**report_kwargs)
                scopeprof.write(sys.stdout, metrics)
                print()
                if logger is not None:
                    logger.log_report(metrics, step=i + 1)

        metrics = scopeprof.report(**report_kwargs)
        scopeprof.write(sys.stdout, metrics)
        if logger is not None:
            logger.log_report(metrics, step=args.frames, print_to_stdout=True)
    finally:
        if logger is not None:
            logger.close()


if __name__ == "__main__":
    main()

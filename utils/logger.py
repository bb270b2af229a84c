import os
import time
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from scopeprof.errors import SinkError
from scopeprof.reporter import NodeMetrics

try:
    from torch.utils.tensorboard import SummaryWriter
except ImportError:
    SummaryWriter = None  # type: ignore[misc, assignment]

COLUMNS = ["path", "count", "time_pct", "self_pct", "frequency",
           "mean", "last", "min", "max", "std", "unit"]


class ProfileLogger:
    """
    Persist profiler reports, supporting TensorBoard and optional CSV logging.

    Args:
        run_name (str): Unique identifier for the run. Defaults to current timestamp.
        runs_root (str): Root directory for storing logs. Defaults to $PROFILE_RUNS_DIR or 'runs'.
        save_csv (bool): Whether to keep every report for CSV export. Defaults to False.
        use_tensorboard (bool): Whether to write per-scope scalars to TensorBoard. Defaults to False.
        config (dict): Settings to print at start-up. Defaults to None.
    """
    def __init__(
        self,
        run_name: Optional[str] = None,
        runs_root: Optional[str] = None,
        save_csv: bool = False,
        use_tensorboard: bool = False,
        config: Optional[Dict] = None,
    ):
        if run_name is None:
            run_name = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        if runs_root is None:
            runs_root = os.getenv("PROFILE_RUNS_DIR", "runs")

        self.run_name = run_name
        self.dir_name = os.path.join(runs_root, run_name)
        os.makedirs(self.dir_name, exist_ok=True)

        self.use_tensorboard = use_tensorboard and (SummaryWriter is not None)
        if use_tensorboard and not self.use_tensorboard:
            print("Warning: tensorboard is not installed, scalar logging disabled")
        self.writer = SummaryWriter(self.dir_name) if self.use_tensorboard else None

        self.save_csv = save_csv
        self.save_every = 10 * 60  # seconds between periodic CSV dumps
        self.last_csv_save = time.time()
        self._rows: List[dict] = []
        self.last_step = 0

        if config is not None:
            log_settings(config)

    def log_report(self, metrics: List[NodeMetrics], step: int, print_to_stdout: bool = False):
        """
        Record one report.

        Args:
            metrics (list[NodeMetrics]): Output of ``scopeprof.report``.
            step (int): Frame / iteration index the report belongs to.
            print_to_stdout (bool): Also print the report as a table.

        Raises:
            SinkError: TensorBoard or CSV writing failed.
        """
        self.last_step = max(self.last_step, step)
        if self.writer is not None:
            try:
                for m in metrics:
                    self.writer.add_scalar(f"{m.path}/mean_{m.unit}", m.mean, step)
                    self.writer.add_scalar(f"{m.path}/time_pct", m.time_pct, step)
                    self.writer.add_scalar(f"{m.path}/frequency", m.frequency, step)
            except Exception as exc:
                raise SinkError(f"TensorBoard write failed: {exc}") from exc

        if self.save_csv:
            for m in metrics:
                row = {"step": step}
                row.update(m.to_dict())
                self._rows.append(row)

            if time.time() - self.last_csv_save > self.save_every:
                self.save2csv()
                self.last_csv_save = time.time()

        if print_to_stdout:
            print_table(metrics)

    def save2csv(self, file_name: Optional[str] = None):
        """Save collected reports to a CSV file."""
        if not self.save_csv or not self._rows:
            return

        if file_name is None:
            file_name = os.path.join(self.dir_name, "profile.csv")

        df = pd.DataFrame(self._rows)
        # 'step' first, then the usual report columns
        cols = ["step"] + [c for c in df.columns if c != "step"]
        try:
            df[cols].to_csv(file_name, index=False)
        except (OSError, ValueError) as exc:
            raise SinkError(f"Failed to write {file_name}: {exc}") from exc

    def close(self):
        """Close the TensorBoard writer and save CSV."""
        if self.writer is not None:
            self.writer.close()
        if self.save_csv:
            self.save2csv()


def to_dataframe(metrics: List[NodeMetrics]) -> pd.DataFrame:
    """One row per reported scope, indexed by path, preorder kept."""
    df = pd.DataFrame([m.to_dict() for m in metrics], columns=["depth", "name"] + COLUMNS)
    return df.set_index("path")


def format_table(headers: List[str], rows: List[list], widths: List[int],
                 align: Optional[List[str]] = None) -> List[str]:
    """
    Lay out *rows* as bordered text lines.

    Cells are stringified and clipped to their column width; floats get two
    decimals. *align* holds '<' or '>' per column (default: left).
    """
    align = align or ["<"] * len(widths)
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells):
        parts = []
        for cell, width, side in zip(cells, widths, align):
            text = f"{cell:.2f}" if isinstance(cell, float) else str(cell)
            parts.append(f" {fit_cell(text, width):{side}{width}} ")
        return "|" + "|".join(parts) + "|"

    return [border, line(headers), border, *(line(r) for r in rows), border]


def log_settings(settings: dict):
    """Print settings as a two-column table."""
    rows = [[key, value] for key, value in settings.items()]
    print("\n".join(format_table(["Setting", "Value"], rows, [30, 40])))


def print_table(metrics: List[NodeMetrics]):
    """Print a report as a table, scopes indented by depth."""
    unit = metrics[0].unit if metrics else "ms"
    headers = [f"scope [{unit}]", "calls", "time %", "self %", "Hz", "mean", "min", "max", "std"]
    rows = [["  " * m.depth + m.name, m.count, m.time_pct, m.self_pct, m.frequency,
             m.mean, m.min, m.max, m.std] for m in metrics]
    widths = [40] + [10] * (len(headers) - 1)
    align = ["<"] + [">"] * (len(headers) - 1)
    print("\n" + "\n".join(format_table(headers, rows, widths, align)) + "\n")


def fit_cell(text: str, width: int) -> str:
    """Clip *text* to *width* characters, marking the cut with '...'."""
    return text if len(text) <= width else text[:width - 3] + "..."

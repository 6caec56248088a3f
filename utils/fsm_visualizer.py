# utils/fsm_visualizer.py

import os
import subprocess
from collections import Counter
from typing import Dict, Optional, Tuple

from model.restoration import Disposition, RestorationState, RunReport
from utils.logger import get_logger

# Conditional import of graphviz
try:
    from graphviz import Digraph

    GRAPHVIZ_AVAILABLE = True
except ImportError:
    GRAPHVIZ_AVAILABLE = False

logger = get_logger(__name__)

VISUALIZATION_OUTPUT_FOLDER = "restoration_visualizations"

DISPOSITION_COLORS: Dict[Disposition, str] = {
    Disposition.ACCEPTED: "palegreen",
    Disposition.HEALTHY: "palegreen",
    Disposition.NO_FOOTPRINT: "lightgrey",
    Disposition.WOULD_RESTORE: "lightgoldenrodyellow",
    Disposition.INSUFFICIENT_BALANCE: "orange",
    Disposition.QUERY_FAILED: "lightcoral",
    Disposition.PREPARE_FAILED: "lightcoral",
    Disposition.SUBMISSION_ERROR: "lightcoral",
}


def transition_counts(report: RunReport) -> Counter:
    """
    Counts how many contracts took each transition. The terminal DONE state
    is split by disposition, so the last edge of every path ends in a node
    named after the contract's disposition.
    """
    counts: Counter = Counter()
    for contract in report.contracts:
        states = [s for s in contract.path if s is not RestorationState.DONE]
        names = [s.name for s in states]
        if contract.disposition is not None:
            names.append(contract.disposition.name)
        for edge in zip(names, names[1:]):
            counts[edge] += 1
    return counts


def build_run_graph(report: RunReport) -> "Digraph":
    """
    Builds a Graphviz diagram of a finished run: the loop states as ellipses,
    one box per disposition reached, and edges labelled with the number of
    contracts that followed them.
    """
    dot = Digraph(comment=f"Restoration run at ledger {report.snapshot_seq}")
    dot.attr(rankdir="LR", nodesep="0.5", ranksep="0.6")
    dot.attr(label=f"Ledger snapshot {report.snapshot_seq}: {len(report.contracts)} contract(s)",
             labelloc="t", fontsize="12")

    for state in RestorationState:
        if state is not RestorationState.DONE:
            dot.node(state.name, state.name.title(), shape="ellipse")

    tally = Counter(r.disposition for r in report.contracts if r.disposition is not None)
    for disposition, count in tally.items():
        dot.node(disposition.name, f"{disposition.name}\n({count})", shape="box",
                 style="filled", fillcolor=DISPOSITION_COLORS.get(disposition, "white"))

    edges: Dict[Tuple[str, str], int] = transition_counts(report)
    for (source, target), count in sorted(edges.items()):
        dot.edge(source, target, label=str(count), penwidth=str(min(1 + count, 6)))
    return dot


def visualize_restoration_run(report: RunReport, base_filename: str = "restoration_run",
                              fmt: str = "png") -> Optional[str]:
    """
    Renders `report` to '<VISUALIZATION_OUTPUT_FOLDER>/<base_filename>.<fmt>'.

    Returns the rendered file path, or None when graphviz is unavailable or
    rendering failed (both only warn; a missing diagram never fails a run).
    """
    if not GRAPHVIZ_AVAILABLE:
        logger.warning("Graphviz library not installed. Skipping run visualization. "
                       "To enable, install graphviz: pip install graphviz")
        return None

    try:
        os.makedirs(VISUALIZATION_OUTPUT_FOLDER, exist_ok=True)
        output_path = os.path.join(VISUALIZATION_OUTPUT_FOLDER, base_filename)
    except OSError as e:
        logger.error(f"Could not create directory {VISUALIZATION_OUTPUT_FOLDER}: {e}. "
                     f"Saving to current directory instead.")
        output_path = base_filename

    dot = build_run_graph(report)
    dot.format = fmt
    try:
        rendered = dot.render(output_path, view=False, cleanup=True)
    except (RuntimeError, OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Failed to render run visualization to {output_path}.{fmt}: {e}. "
                       "Ensure Graphviz executables (dot) are in your system's PATH.")
        return None
    logger.info(f"Run visualization saved to {rendered}")
    return rendered

# utils/conflict_graph.py

import os
from collections import Counter
from typing import TYPE_CHECKING, Iterable, List, Tuple

from graphviz import Graph

from utils.logger import get_logger

if TYPE_CHECKING:
    from logic.scanner import ScanResult

logger = get_logger()


def _rank_pair(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a <= b else (b, a)


def build_conflict_graph(scan: 'ScanResult') -> Graph:
    """
    Builds an undirected graph of the ranks accessing one file. Every rank
    gets a node; each pair of ranks with at least one conflict or
    false-sharing report gets one edge, labelled with the number of each.
    """
    conflicts: Counter = Counter()
    sharing: Counter = Counter()
    for report in scan.conflicts:
        conflicts[_rank_pair(report.first.rank, report.second.rank)] += 1
    for report in scan.false_sharing:
        sharing[_rank_pair(report.first.rank, report.second.rank)] += 1

    nodes = set(scan.ranks)
    for a, b in list(conflicts) + list(sharing):
        nodes.update((a, b))

    dot = Graph(comment=f"Conflicts in {scan.file_name}")
    dot.attr(label=f"{scan.file_name}\n({scan.file_id})", labelloc="t", fontsize="10")

    for rank in sorted(nodes):
        dot.node(f"rank{rank}", f"rank {rank}", shape="ellipse")

    for pair in sorted(set(conflicts) | set(sharing)):
        labels: List[str] = []
        if conflicts[pair]:
            labels.append(f"{conflicts[pair]} conflicts")
        if sharing[pair]:
            labels.append(f"{sharing[pair]} false sharing")
        color = "red" if conflicts[pair] else "orange"
        dot.edge(f"rank{pair[0]}", f"rank{pair[1]}", label="\n".join(labels), color=color)

    return dot


def render_conflict_graphs(scans: Iterable['ScanResult'], out_dir: str, fmt: str = "png") -> List[str]:
    """
    Renders one graph per file that has conflict or false-sharing reports.

    Returns:
        Paths of the rendered files.
    """
    rendered: List[str] = []
    if not os.path.exists(out_dir):
        os.makedirs(out_dir)
        logger.info(f"Created directory for conflict graphs: {out_dir}")

    for scan in scans:
        if not scan.conflicts and not scan.false_sharing:
            continue
        dot = build_conflict_graph(scan)
        dot.format = fmt
        output_path = os.path.join(out_dir, f"conflicts_{scan.file_id}")
        try:
            rendered.append(dot.render(output_path, view=False, cleanup=True))
            logger.info(f"Conflict graph saved to {output_path}.{fmt}")
        except Exception as e:
            logger.warning(f"Failed to render conflict graph to {output_path}.{fmt}: {e}. "
                           "Ensure Graphviz executables (dot) are in your system's PATH.")
    return rendered

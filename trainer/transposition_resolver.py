#!/usr/bin/env python3
"""
Transposition report

Lists positions of an opening graph that are reachable via more than one
(parent position, move) edge, i.e. where different move orders meet.

Usage:
  python transposition_resolver.py --opening "French Defense"
  python transposition_resolver.py --source data/eco
"""

import argparse
import sys
from collections import defaultdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))
from opening_graph import InvalidMoveError, OpeningGraph


def find_transpositions(graph: OpeningGraph) -> dict[str, list[tuple[str, str]]]:
    """Map each position with several incoming edges to its (parent, move) pairs."""
    incoming: dict[str, list[tuple[str, str]]] = defaultdict(list)
    for parent in graph.positions():
        node = graph.node(parent)
        for move, child in node.outgoing_moves.items():
            incoming[child].append((parent, move))

    return {child: edges for child, edges in incoming.items() if len(edges) > 1}


def count_transposition_links(graph: OpeningGraph) -> int:
    """Each pair of distinct parents of one position counts as a link."""
    links = 0
    for edges in find_transpositions(graph).values():
        parents = list(dict.fromkeys(parent for parent, _ in edges))
        n = len(parents)
        links += n * (n - 1) // 2
    return links


def main():
    from line_sources import LineSourceError, load_lines
    from openings import OPENING_LINES

    parser = argparse.ArgumentParser(description="Report transpositions in an opening graph")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--source", help="TSV/PGN file or directory of lines")
    source.add_argument("--opening", choices=sorted(OPENING_LINES), help="Built-in opening")
    args = parser.parse_args()

    graph = OpeningGraph()
    try:
        graph.ingest_lines(load_lines(args.source) if args.source else OPENING_LINES[args.opening])
    except (FileNotFoundError, LineSourceError, InvalidMoveError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    transpositions = find_transpositions(graph)
    print(f"Found {len(transpositions)} transposed positions, {count_transposition_links(graph)} links.")
    for fen, edges in transpositions.items():
        print(f"  {graph.get_line_label(fen) or '-'} | {fen}")
        for parent, move in edges:
            print(f"      {move:8s} from {graph.get_line_label(parent) or '-'}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Command line interface for kg-dashboard.

Usage:
    python -m kgdash layout snapshot.json --output layout.png --highlight top
    python -m kgdash analyze snapshot.json --strategy label_propagation
    python -m kgdash describe snapshot.json 4:abc:12
    python -m kgdash fetch --output snapshot.json --limit 200
"""

import argparse
import json
import sys
from pathlib import Path
from typing import FrozenSet, Optional

from .shared import GraphSnapshot, KGDashError, ValidationError
from .services.layout import ForceLayoutEngine, FrameScheduler
from .services.analytics import (
    compute_analytics, describe_node, highlight_top, highlight_community, records_from_snapshot
)
from .services.visualization import FrameRenderer


def _resolve_highlight(engine: ForceLayoutEngine, spec: Optional[str]) -> FrozenSet[str]:
    """Turn ``top`` or ``community:N`` into a set of node ids."""
    if not spec:
        return frozenset()

    nodes, edges = engine.snapshot()
    analytics = compute_analytics(nodes, edges)
    if spec == 'top':
        return highlight_top(analytics)
    if spec.startswith('community:'):
        try:
            community_id = int(spec.split(':', 1)[1])
        except ValueError:
            raise ValidationError(f"Invalid community highlight: {spec}")
        return highlight_community(analytics, community_id)
    raise ValidationError(f"Unknown highlight '{spec}' (use 'top' or 'community:N')")


def layout_command(args):
    """Lay out a snapshot and render the settled frame"""
    snapshot = GraphSnapshot.from_json_file(args.snapshot)
    engine = ForceLayoutEngine(seed=args.seed)
    engine.load(snapshot)

    ticks = FrameScheduler(engine).run_until_idle()
    print(f"📐 Layout settled after {ticks} ticks ({len(engine.nodes)} nodes, {len(engine.edges)} edges)")

    highlighted = _resolve_highlight(engine, args.highlight)
    output = FrameRenderer().render_engine(engine, args.output, highlighted=highlighted)
    print(f"📈 Frame saved: {output}")

    if args.positions:
        positions = [
            {'id': n.id, 'label': n.label, 'category': n.category, 'x': n.x, 'y': n.y}
            for n in engine.nodes
        ]
        Path(args.positions).write_text(json.dumps(positions, indent=2), encoding='utf-8')
        print(f"💾 Positions saved to: {args.positions}")

    return 0


def analyze_command(args):
    """Print analytics for a snapshot"""
    snapshot = GraphSnapshot.from_json_file(args.snapshot)
    nodes, edges = records_from_snapshot(snapshot)
    analytics = compute_analytics(nodes, edges, top_k=args.top_k, strategy=args.strategy)

    data = analytics.model_dump()
    if args.output:
        Path(args.output).write_text(json.dumps(data, indent=2), encoding='utf-8')
        print(f"💾 Analytics saved to: {args.output}")
    else:
        print(json.dumps(data, indent=2))
    return 0


def describe_command(args):
    """Describe one node of a snapshot"""
    snapshot = GraphSnapshot.from_json_file(args.snapshot)
    nodes, edges = records_from_snapshot(snapshot)
    insight = describe_node(args.node_id, nodes, edges)
    if insight is None:
        print(f"❌ Node not found: {args.node_id}")
        return 1

    print(f"🔍 {insight.label} ({insight.category})")
    print(f"   Connections: {insight.total_connections} ({insight.connectivity_pct:.1f}% of the graph)")
    for connection in insight.connections[:3]:
        print(f"   - {connection.label} ({connection.category}) via {connection.relationship}")
    if len(insight.connections) > 3:
        print(f"   ... and {len(insight.connections) - 3} more connections")
    print(f"   {insight.summary}")
    return 0


def fetch_command(args):
    """Fetch a snapshot from Neo4j into a JSON file"""
    from .services.snapshot import SnapshotService
    from .shared.infrastructure.database import close_database_connections

    try:
        snapshot = SnapshotService().load(limit=args.limit, use_cache=False)
    finally:
        close_database_connections()

    path = snapshot.to_json_file(args.output)
    print(f"💾 Snapshot with {snapshot.node_count} nodes saved to: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kgdash',
        description='kg-dashboard: lay out and analyze knowledge-graph snapshots'
    )

    subparsers = parser.add_subparsers(dest='command', help='Operations')

    layout_parser = subparsers.add_parser('layout', help='Run the force layout and render a frame')
    layout_parser.add_argument('snapshot', help='Snapshot JSON file')
    layout_parser.add_argument('--output', '-o', default='layout.png', help='PNG output path')
    layout_parser.add_argument('--positions', help='Also write node positions to this JSON file')
    layout_parser.add_argument('--seed', type=int, help='Random seed for placement')
    layout_parser.add_argument('--highlight', help="Highlight 'top' or 'community:N'")
    layout_parser.set_defaults(func=layout_command)

    analyze_parser = subparsers.add_parser('analyze', help='Compute graph analytics')
    analyze_parser.add_argument('snapshot', help='Snapshot JSON file')
    analyze_parser.add_argument('--strategy', choices=['positional', 'label_propagation'],
                                default='positional', help='Community partition strategy')
    analyze_parser.add_argument('--top-k', type=int, default=5, help='Length of the degree ranking')
    analyze_parser.add_argument('--output', '-o', help='Save analytics to JSON file')
    analyze_parser.set_defaults(func=analyze_command)

    describe_parser = subparsers.add_parser('describe', help='Describe one node and its neighbours')
    describe_parser.add_argument('snapshot', help='Snapshot JSON file')
    describe_parser.add_argument('node_id', help='Node identifier')
    describe_parser.set_defaults(func=describe_command)

    fetch_parser = subparsers.add_parser('fetch', help='Fetch a snapshot from Neo4j')
    fetch_parser.add_argument('--output', '-o', required=True, help='Snapshot JSON output path')
    fetch_parser.add_argument('--limit', type=int, help='Maximum number of start nodes')
    fetch_parser.set_defaults(func=fetch_command)

    return parser


def main(argv=None):
    """kg-dashboard CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\n⚠️ Operation cancelled by user")
        return 1
    except KGDashError as e:
        print(f"❌ Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

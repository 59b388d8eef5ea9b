#!/usr/bin/env python3
"""
PrettyGraphs CLI

Command-line interface for the simulated-annealing graph layout optimizer.

Usage:
    prettygraphs layout <graph.txt> [options]
    prettygraphs energy <graph.txt> [options]
    prettygraphs generate <count> [options]
    prettygraphs presets
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from .errors import PrettyGraphsError


def load_profile(args):
    """Resolve the layout profile from --preset, --config and overrides."""
    from .config import DEFAULT_PRESET, get_preset, load_config
    from .layout.annealing import TerminationMode

    profile = get_preset(getattr(args, 'preset', None) or DEFAULT_PRESET)
    if getattr(args, 'config', None):
        profile = load_config(args.config, base=profile)

    annealing = profile.annealing
    if getattr(args, 't0', None) is not None:
        annealing.initial_temperature = args.t0
    if getattr(args, 'cooling', None) is not None:
        annealing.cooling_factor = args.cooling
    if getattr(args, 'iterations', None) is not None:
        annealing.max_iterations = args.iterations
    if getattr(args, 'jitter', None) is not None:
        annealing.max_jitter = args.jitter
    if getattr(args, 'either', False):
        annealing.termination = TerminationMode.EITHER
    if getattr(args, 'skip_adjacent_crossings', False):
        profile.energy.skip_shared_endpoint_crossings = True

    profile.validate()
    return profile


def load_graph(args):
    """Read the graph file named on the command line."""
    from .graph.io import read_graph_file

    path = Path(args.graph)
    if not path.exists():
        raise PrettyGraphsError(f"Graph file not found: {path}")
    print(f"Loading graph: {path}")
    graph = read_graph_file(path, strict=args.strict, dedupe_edges=args.dedupe)
    print(f"  Nodes: {len(graph)}")
    print(f"  Edges: {len(graph.edges)}")
    return graph


def print_breakdown(breakdown, indent: str = "  "):
    print(f"{indent}node separation: {breakdown.node_distance:12.3f}")
    print(f"{indent}boundary:        {breakdown.boundary:12.3f}")
    print(f"{indent}edge length:     {breakdown.edge_length:12.3f}")
    print(f"{indent}intersections:   {breakdown.intersections:12.3f} "
          f"({breakdown.crossing_count} crossing pairs)")
    print(f"{indent}angles:          {breakdown.angles:12.3f}")
    print(f"{indent}total:           {breakdown.total:12.3f}")


def write_layout(path: Path, graph, result, canvas):
    """Write the best layout as a graph file or a YAML snapshot."""
    from .graph.io import write_graph_file
    from .graph.snapshot import save_snapshot

    if path.suffix.lower() in ('.yaml', '.yml'):
        save_snapshot(path, result.best_state, energy=result.best_energy,
                      iteration=result.iterations, canvas=canvas)
    else:
        write_graph_file(graph, path, result.best_state)


def cmd_layout(args):
    """Run simulated annealing on a graph file."""
    from .layout.annealing import AnnealingSession
    from .layout.sink import CompositeSink
    from .layout.visualizer import LayoutVisualizer

    profile = load_profile(args)
    graph = load_graph(args)
    annealing = profile.annealing

    rng = random.Random(args.seed)
    visualizer = None
    if args.html or args.svg:
        visualizer = LayoutVisualizer(
            graph,
            profile.energy.canvas,
            interval=args.frame_interval,
            skip_shared_endpoints=profile.energy.skip_shared_endpoint_crossings,
        )

    session = AnnealingSession(
        graph,
        annealing,
        profile.energy,
        rng=rng,
        sink=CompositeSink(visualizer),
    )
    if visualizer:
        visualizer.capture_frame("Initial", session.best_state, temperature=session.temperature,
                                 current_energy=session.current_energy,
                                 best_energy=session.best_energy)

    print(f"\nAnnealing ({profile.name}): T0={annealing.initial_temperature} "
          f"alpha={annealing.cooling_factor} iterations={annealing.max_iterations} "
          f"termination={annealing.termination.value}")
    print(f"  Initial energy: {session.initial_energy:.3f}")

    def progress_callback(step):
        if step.iteration % 100 == 0:
            print(f"  Iteration {step.iteration}: T={step.temperature:.3g} "
                  f"current={step.current_energy:.3f} best={step.best_energy:.3f}")

    try:
        result = session.run(callback=progress_callback if args.verbose else None)
    except KeyboardInterrupt:
        session.cancel()
        result = session.result()

    print(f"  {result.status.value.capitalize()} after {result.iterations} iterations "
          f"({result.accepted_moves} moves accepted)")
    print(f"  Best energy: {result.best_energy:.3f} (improved by {result.improvement:.3f})")
    print_breakdown(session.energy.breakdown(result.best_state), indent="    ")

    if args.output:
        output_path = Path(args.output)
    else:
        graph_path = Path(args.graph)
        output_path = graph_path.with_name(graph_path.stem + '.layout.txt')

    if not args.dry_run:
        print(f"\nSaving to: {output_path}")
        write_layout(output_path, graph, result, profile.energy.canvas)
    else:
        print("\nDry run - not saving layout")

    if visualizer and args.svg:
        visualizer.export_svg(args.svg)
        print(f"SVG saved to: {args.svg}")
    if visualizer and args.html:
        visualizer.export_html_report(args.html)
        print(f"Report saved to: {args.html}")

    return 0


def cmd_energy(args):
    """Print the energy breakdown of a graph's current positions."""
    from .layout.energy import LayoutEnergy

    profile = load_profile(args)
    graph = load_graph(args)
    energy = LayoutEnergy(graph, profile.energy)
    print("\nEnergy:")
    print_breakdown(energy.breakdown(graph.initial_state()))
    return 0


def cmd_generate(args):
    """Write a random graph file."""
    from .graph.io import format_graph
    from .graph.model import Canvas, random_graph

    canvas = Canvas(args.width, args.height)
    canvas.validate()
    graph = random_graph(args.count, canvas, args.edge_probability, random.Random(args.seed))
    text = format_graph(graph)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Wrote {len(graph)} nodes and {len(graph.edges)} edges to {args.output}")
    else:
        sys.stdout.write(text)
    return 0


def cmd_presets(args):
    """List preset profiles."""
    from .config import PRESETS

    for name in sorted(PRESETS):
        profile = PRESETS[name]
        a = profile.annealing
        print(f"{name:10s} T0={a.initial_temperature:<6g} alpha={a.cooling_factor:<5g} "
              f"iterations={a.max_iterations:<5d} {profile.description}")
    return 0


def add_graph_options(parser):
    parser.add_argument('graph', help='Path to a graph file (node/rel lines)')
    parser.add_argument('--preset', help='Preset profile (default: sandbox)')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--dedupe', action='store_true',
                        help='Collapse relations declared on both endpoints into one edge')
    parser.add_argument('--strict', action='store_true',
                        help='Reject the file on the first malformed line')
    parser.add_argument('--skip-adjacent-crossings', action='store_true',
                        help="Don't test edges sharing an endpoint for crossings")


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="PrettyGraphs - simulated-annealing graph layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  prettygraphs layout graph.txt
  prettygraphs layout graph.txt --iterations 500 --seed 7 -o best.yaml --html run.html
  prettygraphs layout graph.txt --config layout.yaml --either
  prettygraphs energy graph.txt
  prettygraphs generate 12 --edge-probability 0.2 -o random.txt
        """,
    )

    parser.add_argument('--version', action='version', version='prettygraphs 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Layout command
    layout_parser = subparsers.add_parser('layout', help='Optimize a graph layout')
    add_graph_options(layout_parser)
    layout_parser.add_argument('-o', '--output',
                               help='Output path (.txt graph file or .yaml snapshot)')
    layout_parser.add_argument('--t0', type=float, help='Initial temperature')
    layout_parser.add_argument('--cooling', type=float, help='Cooling factor in (0, 1)')
    layout_parser.add_argument('--iterations', type=int, help='Iteration budget')
    layout_parser.add_argument('--jitter', type=float, help='Max per-axis move per iteration')
    layout_parser.add_argument('--either', action='store_true',
                               help='Stop at the temperature floor OR the iteration budget')
    layout_parser.add_argument('--seed', type=int, help='Random seed for reproducible runs')
    layout_parser.add_argument('--svg', help='Write the final layout as SVG')
    layout_parser.add_argument('--html', help='Write an HTML playback report')
    layout_parser.add_argument('--frame-interval', type=int, default=10,
                               help='Iterations between captured frames (default: 10)')
    layout_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    layout_parser.add_argument('--dry-run', action='store_true', help="Don't save the layout")

    # Energy command
    energy_parser = subparsers.add_parser('energy', help='Show the energy of a layout')
    add_graph_options(energy_parser)

    # Generate command
    generate_parser = subparsers.add_parser('generate', help='Generate a random graph')
    generate_parser.add_argument('count', type=int, help='Number of nodes')
    generate_parser.add_argument('--edge-probability', type=float, default=0.3,
                                 help='Probability of linking each node pair (default: 0.3)')
    generate_parser.add_argument('--width', type=float, default=256.0, help='Canvas width')
    generate_parser.add_argument('--height', type=float, default=256.0, help='Canvas height')
    generate_parser.add_argument('--seed', type=int, help='Random seed')
    generate_parser.add_argument('-o', '--output', help='Output file (default: stdout)')

    # Presets command
    subparsers.add_parser('presets', help='List preset profiles')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(getattr(args, 'verbose', False))

    # Dispatch command
    commands = {
        'layout': cmd_layout,
        'energy': cmd_energy,
        'generate': cmd_generate,
        'presets': cmd_presets,
    }

    try:
        return commands[args.command](args)
    except PrettyGraphsError as e:
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
evolink — CLI Runner

Headless runs: evolve for N generations, print survivor counts,
optionally export the final generation.

Usage:
    python -m evolink.run --generations 20
    python -m evolink.run --generations 50 --seed 7 --dump dump.json
    python -m evolink.run --config world.json --json
"""

import argparse
import json
import logging
import sys

from .config import WorldConfig, load_config
from .errors import ConfigurationError
from .world import CONDITIONS, GridWorld


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="evolink link-graph evolution")
    parser.add_argument("--generations", type=int, default=10, help="Generations to run")
    parser.add_argument("--config", type=str, default=None, help="JSON world config")
    parser.add_argument("--population", type=int, default=None, help="Population size")
    parser.add_argument("--turns", type=int, default=None, help="Turns per generation")
    parser.add_argument("--neurons", type=int, default=None, help="Neurons per entity")
    parser.add_argument("--max-links", type=int, default=None, help="Link cap per entity")
    parser.add_argument("--mutation-rate", type=float, default=None, help="Mutation rate [0, 1]")
    parser.add_argument("--condition", choices=sorted(CONDITIONS), default=None,
                        help="Selection condition")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--dump", type=str, default=None, help="Write final generation to this file")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args) -> WorldConfig:
    overrides = {
        'population_size': args.population,
        'turns_per_generation': args.turns,
        'neuron_count': args.neurons,
        'max_links': args.max_links,
        'mutation_rate': args.mutation_rate,
        'condition': args.condition,
        'seed': args.seed,
    }
    if args.config:
        return load_config(args.config, **overrides)
    return WorldConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except (ConfigurationError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    world = GridWorld(config)

    if not args.quiet and not args.json:
        print("evolink\n")
        print(f"Config: {config.population_size} entities, {config.turns_per_generation} turns/gen, "
              f"{config.neuron_count} neurons, {config.max_links} max links, "
              f"mutation {config.mutation_rate}, condition {config.condition}\n")

    for _ in range(args.generations):
        world.run_generation()
        for event in world.pop_events():
            if event['type'] == 'extinction' and not args.json:
                print(f"Generation {event['generation']}: extinct, reseeded")
        if not args.quiet and not args.json:
            last = world.history[-1]
            print(f"Generation {last['generation']}: {last['survivors']}/{last['population_size']} "
                  f"survived ({last['survival_rate']:.1%})")

    if args.dump:
        with open(args.dump, "w") as f:
            json.dump(world.dump_generation(), f, indent="\t")
        if not args.quiet and not args.json:
            print(f"\nDumped generation {world.generation_number} to {args.dump}")

    if args.json:
        print(json.dumps({
            "generations": world.generation_number,
            "config": config.model_dump(),
            "history": world.history,
        }, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Utility script to evolve maze-running agents from the command line.

Usage:
    python scripts/run_maze.py trial
    python scripts/run_maze.py trial --generations 20 --seed 7
    python scripts/run_maze.py experiment --num-trials 10 --num-jobs 4
"""

import sys
import argparse
from pathlib import Path

# Add the source directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from evomaze import Config, Experiment, Trial

DEFAULT_CONFIG = str(Path(__file__).parent.parent / 'examples' / 'configs' / 'config_maze.ini')


def main():
    parser = argparse.ArgumentParser(description='Evolve maze-running agents')
    parser.add_argument('mode', choices=['trial', 'experiment'],
                        help='Run a single trial or a full experiment')
    parser.add_argument('--config', default=DEFAULT_CONFIG,
                        help='Path to the INI configuration file')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed of the random generator (overrides the configuration)')
    parser.add_argument('--generations', type=int, default=None,
                        help='Maximum number of generations (overrides the configuration)')
    parser.add_argument('--num-trials', type=int, default=10,
                        help='Number of trials for experiment mode')
    parser.add_argument('--num-jobs', type=int, default=1,
                        help='Number of parallel jobs for experiment mode')

    args = parser.parse_args()

    config = Config(args.config)
    if args.seed is not None:
        config.seed = args.seed
    if args.generations is not None:
        config.max_generations = args.generations

    print(f"Mode: {args.mode}")
    print(f"Population size: {config.population_size}, generations: {config.max_generations}")

    if args.mode == 'trial':
        trial = Trial(config)
        trial.run()
        print(f"\nBest score: {trial.best_score:.2f}")
    else:
        experiment = Experiment(num_trials=args.num_trials, config=config)
        experiment.run(num_jobs=args.num_jobs)


if __name__ == '__main__':
    main()

"""
Phenotype Package

This package provides the neural network that controls an Agent.

Exported:
    Brain: Fixed-topology feed-forward network with clone, mutate and crossover
"""

from evomaze.phenotype.brain import Brain

__all__ = [
    'Brain',
]

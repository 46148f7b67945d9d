from evomaze.pool.evolver import Evolver

__all__ = ['Evolver']

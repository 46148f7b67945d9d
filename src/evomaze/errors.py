"""
Evomaze Errors Module

Exceptions raised by the core when a caller breaks one of its contracts.
All of them indicate a programming error upstream, so they are never caught
and retried inside the library; they derive from ValueError so that callers
which only care about "bad argument" can handle them uniformly.

Classes:
    StructureMismatchError:      Two Brains with different layer sizes were combined
    InputSizeMismatchError:      An input vector does not match a Brain's input layer
    PopulationSizeMismatchError: Brain and score lists handed to the Evolver differ in length
"""

class StructureMismatchError(ValueError):
    """
    Raised when crossover is attempted between Brains whose layer-size
    lists differ. A population must always share a single topology.
    """

class InputSizeMismatchError(ValueError):
    """
    Raised when the length of an input vector differs from the size
    of the first layer of the Brain it is fed to.
    """

class PopulationSizeMismatchError(ValueError):
    """
    Raised when the Evolver receives a list of Brains and a list
    of fitness scores of different lengths.
    """

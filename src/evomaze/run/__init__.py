"""
Run Package

This package provides the configuration and the drivers of the evolutionary
loop, from a single Episode up to an experiment made of many trials.

Exported:
    Config:               Configuration parameters, read from an INI file
    Episode:              One play-through of a maze
    GenerationController: Runs generations of Episodes and evolves their Brains
    GenerationRecord:     Statistics of one completed generation
    Trial:                One headless run of the evolutionary loop
    Experiment:           Several independent Trials
"""

from evomaze.run.config     import Config
from evomaze.run.episode    import Episode, grid_dimensions
from evomaze.run.controller import GenerationController
from evomaze.run.trial      import GenerationRecord, Trial
from evomaze.run.experiment import Experiment

__all__ = [
    'Config',
    'Episode',
    'grid_dimensions',
    'GenerationController',
    'GenerationRecord',
    'Trial',
    'Experiment',
]

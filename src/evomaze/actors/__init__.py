"""
Actors Package

This package provides the characters moving through the maze and the
sensor model through which the agent perceives it.

Exported:
    Agent:          The character controlled by a Brain
    Pursuer:        A non-learning opponent
    PursuerKind:    The four behaviour profiles of pursuers
    PursuerProfile: Speed, noise and targeting function of a profile
    build_profiles: Build the profile table from a Config
    sense_state:    Build the agent's sensor vector
    SENSOR_SIZE:    Length of the sensor vector
"""

from evomaze.actors.sensors import SENSOR_SIZE, sense_state
from evomaze.actors.pursuer import Pursuer, PursuerKind, PursuerProfile, build_profiles
from evomaze.actors.agent   import Agent

__all__ = [
    'Agent',
    'Pursuer',
    'PursuerKind',
    'PursuerProfile',
    'build_profiles',
    'sense_state',
    'SENSOR_SIZE',
]

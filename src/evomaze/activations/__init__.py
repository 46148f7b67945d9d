"""
Activations Package

This package provides activation functions for the Brain's feed-forward layers.

Exported:
    activations: Dictionary mapping activation function names to functions
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, sigmoid_activation, tanh_activation
"""

from evomaze.activations.basic_activations import (
    activations,
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation
)

__all__ = [
    'activations',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'sigmoid_activation',
    'tanh_activation',
]

"""
Brain Module

This module implements the fixed-topology feed-forward neural network that
drives an Agent. A Brain is described by an ordered list of layer sizes; every
pair of consecutive layers owns a weight matrix and a bias vector. Hidden layers
apply a rectified-linear activation and the output layer a logistic sigmoid,
so each output lies strictly inside (0, 1).

Brains are what the genetic algorithm breeds: they can be cloned, mutated and
recombined with a structure-compatible Brain. All randomness is drawn from an
explicitly passed numpy Generator, which makes a run reproducible from its seed.

Classes:
    Brain: Feed-forward network with clone, mutate and crossover operators
"""

import numpy as np
from typing import Sequence

from evomaze.activations import activations
from evomaze.errors      import InputSizeMismatchError, StructureMismatchError

class Brain:
    """
    A fixed-topology feed-forward neural network.

    The parameters for the transition from layer i to layer i+1 are stored as a
    weight matrix of shape (layer_sizes[i], layer_sizes[i+1]) and a bias vector
    of shape (layer_sizes[i+1],). Forward propagation computes, for each layer,
    activation(values @ weights + biases).

    Public Properties:
        layer_sizes:       Tuple with the number of neurons in each layer
        weights:           List of weight matrices, one per layer transition
        biases:            List of bias vectors, one per layer transition
        number_parameters: Total number of weights and biases

    Public Methods:
        infer(inputs):                Forward pass, returns the output layer values
        clone():                      Deep copy sharing no storage with the original
        mutate(rate, amount, rng):    Perturb parameters in place
        is_compatible(other):         Whether two Brains share the same layer sizes
        crossover(a, b, rng):         Single-point crossover per parameter array (static)
        from_parameters(...):         Build a Brain from explicit weights and biases (class method)
    """

    def __init__(self,
                 layer_sizes      : Sequence[int],
                 rng              : np.random.Generator | None = None,
                 hidden_activation: str = "relu",
                 output_activation: str = "sigmoid"):
        """
        Create a Brain with weights and biases drawn uniformly from [-1, 1].

        Parameters:
            layer_sizes:       Number of neurons in each layer (at least two layers)
            rng:               Source of randomness; a fresh unseeded Generator if None
            hidden_activation: Name of the activation applied to hidden layers
            output_activation: Name of the activation applied to the output layer
        """
        self._layer_sizes: tuple[int, ...] = Brain._validate_layer_sizes(layer_sizes)

        Brain._validate_activations(hidden_activation, output_activation)
        self._hidden_activation_name: str = hidden_activation
        self._output_activation_name: str = output_activation

        if rng is None:
            rng = np.random.default_rng()

        self._weights: list[np.ndarray] = []
        self._biases : list[np.ndarray] = []
        for size_in, size_out in zip(self._layer_sizes[:-1], self._layer_sizes[1:]):
            self._weights.append(rng.uniform(-1.0, 1.0, size=(size_in, size_out)))
            self._biases.append(rng.uniform(-1.0, 1.0, size=size_out))

    @staticmethod
    def _validate_layer_sizes(layer_sizes: Sequence[int]) -> tuple[int, ...]:
        sizes = tuple(int(size) for size in layer_sizes)
        if len(sizes) < 2:
            raise ValueError(f"A Brain needs at least 2 layers, got {len(sizes)}")
        if any(size < 1 for size in sizes):
            raise ValueError(f"Layer sizes must be positive, got {list(sizes)}")
        return sizes

    @staticmethod
    def _validate_activations(*names: str) -> None:
        for name in names:
            if name not in activations:
                raise ValueError(f"Unknown activation function: '{name}'")

    @classmethod
    def from_parameters(cls,
                        layer_sizes      : Sequence[int],
                        weights          : Sequence[np.ndarray],
                        biases           : Sequence[np.ndarray],
                        hidden_activation: str = "relu",
                        output_activation: str = "sigmoid") -> 'Brain':
        """
        Build a Brain from explicit parameter arrays (the arrays are copied).

        Parameters:
            layer_sizes: Number of neurons in each layer
            weights:     One weight matrix per layer transition, shape (size_in, size_out)
            biases:      One bias vector per layer transition, shape (size_out,)

        Returns:
            The new Brain
        """
        sizes = cls._validate_layer_sizes(layer_sizes)
        if len(weights) != len(sizes) - 1 or len(biases) != len(sizes) - 1:
            raise ValueError(f"Expected {len(sizes) - 1} weight matrices and bias vectors")
        cls._validate_activations(hidden_activation, output_activation)

        brain = cls.__new__(cls)
        brain._layer_sizes = sizes
        brain._hidden_activation_name = hidden_activation
        brain._output_activation_name = output_activation
        brain._weights = []
        brain._biases  = []
        for i, (size_in, size_out) in enumerate(zip(sizes[:-1], sizes[1:])):
            w = np.array(weights[i], dtype=np.float64).reshape(size_in, size_out)
            b = np.array(biases[i],  dtype=np.float64).reshape(size_out)
            brain._weights.append(w)
            brain._biases.append(b)
        return brain

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return self._layer_sizes

    @property
    def weights(self) -> list[np.ndarray]:
        return self._weights

    @property
    def biases(self) -> list[np.ndarray]:
        return self._biases

    @property
    def number_parameters(self) -> int:
        return sum(w.size for w in self._weights) + sum(b.size for b in self._biases)

    def infer(self, inputs) -> np.ndarray:
        """
        Propagate an input vector through the network.

        Parameters:
            inputs: Input values, list or numpy array
                    Shape: (num_inputs,) or (batch_size, num_inputs)

        Returns:
            Output values as numpy array
            Shape: (num_outputs,) or (batch_size, num_outputs)
        """
        values = np.asarray(inputs, dtype=np.float64)
        if values.ndim not in (1, 2):
            raise ValueError(f"Input must be 1D or 2D array, got {values.ndim}D")

        expected_inputs = self._layer_sizes[0]
        actual_inputs   = values.shape[-1]
        if actual_inputs != expected_inputs:
            raise InputSizeMismatchError(f"Expected {expected_inputs} inputs, got {actual_inputs}")

        hidden_activation = activations[self._hidden_activation_name]
        output_activation = activations[self._output_activation_name]

        last = len(self._weights) - 1
        for i, (w, b) in enumerate(zip(self._weights, self._biases)):
            z = values @ w + b
            values = output_activation(z) if i == last else hidden_activation(z)
        return values

    def clone(self) -> 'Brain':
        """
        Create an independent deep copy of this Brain.
        """
        return Brain.from_parameters(self._layer_sizes,
                                     self._weights,
                                     self._biases,
                                     self._hidden_activation_name,
                                     self._output_activation_name)

    def mutate(self, rate: float, amount: float = 0.2, rng: np.random.Generator | None = None) -> None:
        """
        Mutate this Brain in place.

        Each weight and each bias is, independently and with probability 'rate',
        shifted by a value drawn uniformly from [-amount, amount].

        Parameters:
            rate:   Probability that any single parameter is perturbed
            amount: Maximum absolute size of a perturbation
            rng:    Source of randomness; a fresh unseeded Generator if None
        """
        if rng is None:
            rng = np.random.default_rng()

        for array in self._weights + self._biases:
            mask    = rng.random(array.shape) < rate
            perturb = rng.uniform(-amount, amount, size=array.shape)
            array[mask] += perturb[mask]

    def is_compatible(self, other: 'Brain') -> bool:
        """
        Two Brains are structure-compatible if their layer-size lists are equal.
        """
        return self._layer_sizes == other._layer_sizes

    @staticmethod
    def crossover(parent1: 'Brain', parent2: 'Brain', rng: np.random.Generator | None = None) -> 'Brain':
        """
        Create one offspring by single-point crossover of two compatible Brains.

        Every weight matrix and every bias vector is treated as a flat array and
        recombined independently: a split index is drawn at random, elements before
        it are taken from 'parent1', elements from the split onwards from 'parent2'.

        Parameters:
            parent1: First parent, contributes the leading part of each array
            parent2: Second parent, contributes the trailing part of each array
            rng:     Source of randomness; a fresh unseeded Generator if None

        Returns:
            The offspring Brain
        """
        if not parent1.is_compatible(parent2):
            raise StructureMismatchError(
                f"Cannot crossover networks with different structures: "
                f"{list(parent1.layer_sizes)} vs {list(parent2.layer_sizes)}")

        if rng is None:
            rng = np.random.default_rng()

        def recombine(a: np.ndarray, b: np.ndarray) -> np.ndarray:
            split = int(rng.integers(0, a.size))
            child = np.concatenate((a.ravel()[:split], b.ravel()[split:]))
            return child.reshape(a.shape)

        weights = [recombine(a, b) for a, b in zip(parent1._weights, parent2._weights)]
        biases  = [recombine(a, b) for a, b in zip(parent1._biases,  parent2._biases)]

        return Brain.from_parameters(parent1._layer_sizes,
                                     weights,
                                     biases,
                                     parent1._hidden_activation_name,
                                     parent1._output_activation_name)

    def __str__(self):
        lines = [f"Brain {'-'.join(str(size) for size in self._layer_sizes)}"]
        for i, (w, b) in enumerate(zip(self._weights, self._biases)):
            lines.append(f"  [{i}] weights {w.shape[0]}x{w.shape[1]}, "
                         f"|w| mean={np.abs(w).mean():.3f}, |b| mean={np.abs(b).mean():.3f}")
        return "\n".join(lines)

    def __repr__(self):
        return (f"Brain(layers={list(self._layer_sizes)}, "
                f"parameters={self.number_parameters})")

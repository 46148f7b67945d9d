import numpy as np

def identity_activation(z):
    return z

def clamped_activation(z):
    return np.clip(z, -1.0, 1.0)

def relu_activation(z):
    return np.maximum(0.0, z)

def sigmoid_activation(z):
    # Clipping keeps the result strictly inside (0, 1) in float64
    # and avoids overflow when calculating exp.
    z = np.clip(z, -30.0, 30.0)
    return 1.0 / (1.0 + np.exp(-z))

def tanh_activation(z):
    return np.tanh(z)

activations = {
    "identity": identity_activation,
    "clamped" : clamped_activation,
    "relu"    : relu_activation,
    "sigmoid" : sigmoid_activation,
    "tanh"    : tanh_activation,
    }

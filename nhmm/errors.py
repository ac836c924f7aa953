"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""


class NhmmError(Exception):
    pass


class NoSolutionError(NhmmError):
    """The constraint cannot be satisfied at the trained length: a layer is empty after arc consistency."""

    def __init__(self, layer_index, message=None):
        self.layer_index = layer_index
        if message is None:
            message = f"empty layer {layer_index} after arc consistency, no sequence satisfies the constraint"
        super().__init__(message)


class InconsistentModelError(NhmmError):
    """A trained model breaks its own invariants (dead end, zero row)."""


class ModelNotTrainedError(NhmmError):
    def __init__(self, message="model has not been (successfully) trained"):
        super().__init__(message)

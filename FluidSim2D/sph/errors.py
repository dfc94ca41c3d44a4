# -- SPH Error Types -- #

'''
Exceptions raised by the fluid engine.

Only configuration and initialization problems are raised. Numerical
degeneracies inside a substep (empty neighborhoods, coincident
particles) are absorbed by the stage pipeline itself.

Sean Bowman [10/19/2026]
'''

from __future__ import annotations

import math

import numpy as np


class InvalidArgument(ValueError):
    '''Bad particle counts, mismatched arrays, or invalid parameters.'''


def requirePositive(name: str, value: float) -> None:
    '''Raise InvalidArgument unless value is finite and > 0.'''
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidArgument(f'{name} must be a positive finite number, got {value}')


def requireFinite(name: str, value: float | np.ndarray) -> None:
    '''Raise InvalidArgument if value (scalar or array) holds NaN or inf.'''
    if not np.all(np.isfinite(value)):
        raise InvalidArgument(f'{name} must be finite, got {value}')


def requireInteger(name: str, value: float) -> int:
    '''
    Return value as an int, accepting integral floats such as 3.0.

    Raises:
    -------
    InvalidArgument : If value is not a finite whole number
    '''
    if isinstance(value, bool) or not np.isscalar(value):
        raise InvalidArgument(f'{name} must be an integer, got {value!r}')
    try:
        whole = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument(f'{name} must be an integer, got {value!r}') from None
    if whole != value:
        raise InvalidArgument(f'{name} must be an integer, got {value!r}')
    return whole

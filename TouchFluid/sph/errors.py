# -- SPH Error Types -- #

'''
Exception types raised by the SPH engine.

NumericFault signals a NaN or infinity produced by a kernel or
force evaluation. A faulted step is never applied to the particle
state, so the fluid remains at its last good snapshot.

InvalidDomain signals a degenerate or inverted simulation
rectangle at construction time.

Sean Bowman [02/09/2026]
'''

from __future__ import annotations

import numpy as np


class NumericFault(ArithmeticError):
    '''A kernel or force evaluation produced NaN or infinity.'''


class InvalidDomain(ValueError):
    '''The simulation domain is degenerate, inverted or non-finite.'''


def validateFinite(value, what: str):
    '''
    Return value unchanged if every element is finite.

    Parameters:
    -----------
    value : float | np.ndarray
        Scalar or array to check
    what : str
        Name of the quantity, used in the error message

    Returns:
    --------
    float | np.ndarray : The input value

    Raises:
    -------
    NumericFault : If any element is NaN or infinite
    '''
    if not np.all(np.isfinite(value)):
        raise NumericFault(f'Non-finite {what}')
    return value

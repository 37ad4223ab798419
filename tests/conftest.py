# -- Test Fixtures -- #

'''
Pytest configuration and shared fixtures for TouchFluid tests.

Sean Bowman [02/11/2026]
'''

import sys
from pathlib import Path

import numpy as np
import pytest


# Add project root to path
projectRoot = Path(__file__).parent.parent
if str(projectRoot) not in sys.path:
    sys.path.insert(0, str(projectRoot))


class FakeClock:
    '''Manually advanced clock returning seconds.'''

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def fakeClock():
    return FakeClock()


@pytest.fixture
def domain():
    return (np.array([0.0, 0.0]), np.array([100.0, 100.0]))

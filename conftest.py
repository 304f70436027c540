# Configuration for the tests.
# Use `py.test` to run the tests.

# (This file needs to be in or above the directory where py.test is called)

# Real TIM samples aren't shipped.  Drop some into psxtim/tests/data (any
# depth, *.tim) or pass --tim-root=DIR to run test_samples.py against them.

import pytest
import os

def pytest_addoption(parser):
    group = parser.getgroup("psxtim")
    group.addoption("--tim-root", action="store", default=None,
        help="Directory of real TIM files to decode (if not specified and psxtim/tests/data doesn't exist, tests are skipped)")
    group.addoption("--all", action="store_true", default=False,
        help="Run all tests, even those that take a lot of time")

def pytest_configure(config):
    config.addinivalue_line("markers", "slow: takes a while; only run with --all")

def pytest_runtest_setup(item):
    if 'slow' in item.keywords and not item.config.getvalue('all'):
        pytest.skip("skipping slow tests")

@pytest.fixture(scope="session")
def tim_root(request):
    tim_root = request.config.getvalue("tim_root")
    if not tim_root:
        tim_root = os.path.join(os.path.dirname(__file__), 'psxtim', 'tests', 'data')
        if not os.path.isdir(tim_root):
            raise pytest.skip("TIM samples unavailable")
    return tim_root

"""
Unit tests for the test runner command line.
"""

import sys

from run_tests import SUITES, build_command


class TestBuildCommand:
    """Tests for build_command."""

    def test_defaults_to_whole_suite(self):
        assert build_command([]) == [sys.executable, "-m", "pytest", "tests/"]

    def test_options(self):
        cmd = build_command([SUITES["unit"]], verbose=True, keyword="links", exitfirst=True)
        assert cmd == [sys.executable, "-m", "pytest", "-v", "-x", "-k", "links", "tests/unit/"]

    def test_coverage_targets_package(self):
        cmd = build_command(["tests/unit/test_links.py"], coverage=True)
        assert "--cov=restdao" in cmd
        assert cmd[-1] == "tests/unit/test_links.py"

"""
Pytest configuration for QuickJava tests.
"""
import os
import sys

import pytest

# Make `quickjava` and the `webapp` namespace package importable without installing.
_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if _ROOT not in sys.path:
	sys.path.insert(0, _ROOT)


def wrap_main(*body: str) -> str:
	"""Place statements inside `public class Main` / `main`. Body lines start at line 3."""
	lines = ["public class Main {", "    public static void main(String[] args) {"]
	lines += ["        " + line for line in body]
	lines += ["    }", "}"]
	return "\n".join(lines)


@pytest.fixture
def program():
	return wrap_main

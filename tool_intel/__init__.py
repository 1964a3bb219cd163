"""Tool-Output Intelligence Layer

Turns build-tool output, test-runner output and live terminal grids into
structured diagnostics, test results and session state.
"""

__version__ = "1.0.0"

"""capcheck - concurrent capability-probe harness.

Runs a catalog of named probes against a host environment's exposed
capabilities and reports pass/fail/skip and missing-alias counts.
"""

__version__ = "0.3.0"

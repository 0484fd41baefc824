"""
Fake implementations for testing.

This package contains fake (test double) implementations of core interfaces,
following the "fakes over mocks" philosophy. Fakes are simplified working
implementations that behave like real components but avoid external dependencies.

Key fakes:
- ScriptedBackend: Backend answering from callables, with scripted failures
- RecordingSleep: Sleep replacement that records delays (no real waiting)

Philosophy:
- Fakes implement the same interface as real components
- Tests using fakes are fast, deterministic, and maintainable
"""

from tests.fakes.backend import ALWAYS, ScriptedBackend, default_analysis, default_summary
from tests.fakes.sleep import RecordingSleep

__all__ = [
    "ALWAYS",
    "ScriptedBackend",
    "default_analysis",
    "default_summary",
    "RecordingSleep",
]

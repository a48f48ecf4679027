"""Test utilities for perch routers and pipelines.

Provides a recording final handler and a reusable integration-test base
for router implementations::

    from perch.testing import ImplicitMethodsIntegrationTests, RecordingHandler

Importing ``ImplicitMethodsIntegrationTests`` requires pytest
(``pip install perch[test]``).
"""

from perch.testing.recording import RecordingHandler

__all__ = [
    "ImplicitMethodsIntegrationTests",
    "RecordingHandler",
]


def __getattr__(name: str) -> object:
    """Lazy import so ``perch.testing`` does not require pytest by itself."""
    if name == "ImplicitMethodsIntegrationTests":
        from perch.testing.integration import ImplicitMethodsIntegrationTests

        return ImplicitMethodsIntegrationTests

    msg = f"module 'perch.testing' has no attribute {name!r}"
    raise AttributeError(msg)

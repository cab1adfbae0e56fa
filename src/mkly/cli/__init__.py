"""CLI layer — process glue, rendering, and the error boundary.

This package is the outermost layer. It may import from ``core``,
``values`` and ``utils``, but no other layer may import from ``cli``.
"""

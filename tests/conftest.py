"""Shared pytest fixtures and configuration for the mkly test suite.

Guidelines
----------
* Core tests must be pure — no printing, no filesystem.
* Filesystem queries of path values use ``tmp_path`` only.
* Rendered output is inspected through ``capsys``.
"""

from __future__ import annotations

from __future__ import annotations

import os

import pytest


def require_arch_checks_enabled() -> None:
    """Skip architecture checks unless SYSBUNDLE_ARCH_CHECKS=1."""

    if os.getenv("SYSBUNDLE_ARCH_CHECKS") != "1":
        pytest.skip(
            "architecture checks are advisory; set SYSBUNDLE_ARCH_CHECKS=1 to enable",
        )

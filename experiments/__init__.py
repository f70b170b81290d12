"""
Experiments Module
==================

This module provides scripts for running spectral rejection.

Scripts
-------
run_rejection
    Run spectral rejection on one network file and report the result
"""

__all__ = [
    "run_rejection",
]

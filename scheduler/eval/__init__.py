"""
Regression harness for the scheduler.

Provides tools for replaying YAML-described task sets through the scheduling
pipeline, checking invariants and expected values, and writing JSON reports.
"""

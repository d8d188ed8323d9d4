"""
Unit tests for the pure building blocks: the fixed-point numeric helpers,
ABI function wrappers and configuration loading. No chain access.
"""

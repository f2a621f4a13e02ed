"""Traffic generation for network simulation.

This module provides the per-time-slot traffic generator that turns node
rate tables into packet draws.
"""

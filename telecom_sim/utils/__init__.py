"""Utilities for exporting, recording and plotting simulation results."""

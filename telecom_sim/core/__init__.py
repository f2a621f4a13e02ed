"""Core components for network simulation.

This module contains the simulation engine and the state it mutates,
including the Packet, Link, Node and NetworkSimulator classes.
"""

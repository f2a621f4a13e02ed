"""HTTP service layer around the simulation engine."""

from telecom_sim.api.app import create_app

__all__ = ["create_app"]

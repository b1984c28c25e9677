"""Computation services built on top of the stores."""

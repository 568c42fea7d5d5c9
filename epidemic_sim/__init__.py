"""
Epidemic sim is a place-based model for disease outbreak modeling. A synthetic population is split into roles, every
person in a role shares places of one category, and a daily clock moves people through the disease stages.

The main entrypoint is :func:`epidemic_sim.simulation.basicSimulation`, which runs an `EpidemicModel` (usually read
from a configuration file with :mod:`epidemic_sim.loaders`) and returns the daily compartment counts as a pandas
DataFrame.
"""

"""
Tadro Swarm: light-seeking collective motion of simple mobile agents.

A small group of Tadros moves on a plane, pulled toward a light source,
carried by their own inertia and pushed apart by short-range repulsion.
How stable is the group while it travels?
"""

__version__ = "0.1.0"

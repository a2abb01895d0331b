"""BASTION - core-defense wave simulation.

Packages:
  comms       -- EventBus pub/sub for simulation events
  units       -- enemy-kind stat table
  simulation  -- engine, wave director, fire controller, clocks
"""

__version__ = "0.1.0"

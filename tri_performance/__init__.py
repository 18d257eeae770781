"""Triathlon performance toolkit: training zones and race time predictions.

Modules:
- io: Time and pace text codec
- models: Typed domain objects, race reference tables and athlete profiles
- metrics: Swim, bike, run and heart-rate training zones
- prediction: Bike power/speed solver, bike race, triathlon and split calculators
- reporting: pandas tables for zones and predictions
- cli: Command line interface
"""

__all__ = [
    "io",
    "models",
    "metrics",
    "prediction",
    "reporting",
    "cli",
]

"""
Landmark-based Monte Carlo localization simulation
"""

__version__ = "0.1.0"

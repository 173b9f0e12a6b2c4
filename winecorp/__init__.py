"""
WineCorp package

This package provides the business engine of a winery management
simulation.  It separates the core services (finance, credit rating,
board, shares, loans, customers), domain objects, data tables,
normalisation rules and console reports into distinct subpackages.
"""

__all__ = ["core", "domain", "data", "rules", "ui"]

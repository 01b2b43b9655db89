"""
cranectl: view, compare and adopt Crane resource recommendations.
"""

__version__ = "0.1.0"

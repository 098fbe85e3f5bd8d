"""
DevSecOps Maturity Engine
=========================
Scores software projects across eight DevSecOps pillars and keeps each
project's current assessment and assessment history in a key-value store.
"""

__version__ = "1.0.0"
__author__ = "DevSecOps Maturity Engine"

"""
Routes Package
==============
Flask blueprints for the StudySplit API.
"""

from .training_routes import training_bp

__all__ = ['training_bp']

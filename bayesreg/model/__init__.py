"""
Model specification: prior overrides and the data they are combined with.
"""

from bayesreg.model.specification import ModelSpecification, PriorSpec

__all__ = [
    "ModelSpecification",
    "PriorSpec",
]

"""
checklints - audit repositories against checklists of constraints

Checklists declare facts, conditions, checks and requirements about a
project tree. Results are cached per project and keyed by file content
hashes and check fingerprints.
"""

__version__ = "0.2.1"
__all__ = ["__version__"]

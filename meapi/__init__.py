"""
me-api: a personal profile (identity, skills, work history, projects)
served as a small JSON HTTP API over a relational store.
"""

__version__ = "1.0.0"

"""
Task board backend: projects, members, tickets and comments.
"""

__version__ = "0.1.0"

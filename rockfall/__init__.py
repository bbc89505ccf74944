"""A match-three puzzle game of falling rocks, with a pygame front end."""

__version__ = "1.0.0"
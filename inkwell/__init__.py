"""Inkwell - a small multi-user blogging service.

Blogs are named folders with an optional description; posts are titled
bodies of text stored inside them. Storage is pluggable: a directory tree
on disk keyed by encoded names (default) or a relational database.
"""

__version__ = "0.1.0"

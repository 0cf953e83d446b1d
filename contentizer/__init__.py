"""
Contentizer.

Rewrites text with a remote language model while enforcing a daily
request quota and keeping a bounded history of past rewrites.
"""

__version__ = "0.1.0"

"""
Command line interface for Contentizer.
"""

"""
Core modules for Contentizer.

This package contains the request orchestration: quota gate, credential
resolution, prompt construction, history buffer and the optimizer service.
"""

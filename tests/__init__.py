"""
Test suite for quillpress.
"""

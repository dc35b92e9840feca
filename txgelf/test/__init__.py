"""
Tests for txgelf.
"""

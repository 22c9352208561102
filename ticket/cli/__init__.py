"""
Command Line Package
"""

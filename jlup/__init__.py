"""
jlup - a channel based version manager for Julia.
"""

__version__ = "0.4.0"

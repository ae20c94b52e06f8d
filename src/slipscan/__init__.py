"""
Packing-slip sample scanner.

Turns decoded sample-tag QR codes into a de-duplicated packing-slip item list.
"""

__version__ = "1.0.0"

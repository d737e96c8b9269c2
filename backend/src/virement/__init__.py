"""
Virement - bank transfer order letters rendered as print-ready PDFs.
"""

__version__ = "0.1.0"

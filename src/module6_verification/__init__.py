"""
Module 6: Verification

Compares an extracted payload against an expected payload and reports a
verdict with the extraction confidence.
"""

from .comparator import VerificationComparator, VerificationResult


__all__ = [
    'VerificationComparator',
    'VerificationResult',
]

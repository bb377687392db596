"""
Billed Portal Core - Source Package

Client-side business logic of the Billed employee expense-report portal:
sign employees and administrators in, list and format their expense bills,
and submit a new bill together with its proof-of-purchase file.

DESIGN PRINCIPLES:
1. Every unit receives its collaborators (store, session, navigation)
2. One corrupt record never hides the others
3. Failures are logged as diagnostics, not swallowed silently
4. The remote store is swappable
"""

__version__ = "1.0.0"
__author__ = "Billed Team"

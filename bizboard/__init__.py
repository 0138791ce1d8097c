"""
BizBoard - Source Package

A small-business bookkeeping dashboard: revenue, expenses and
appointments kept in one shared ledger, with aggregate summaries
and AI-suggested expense categories.

DESIGN PRINCIPLES:
1. One ledger owns every record; screens only read and add through it
2. Validate before mutating, never after
3. AI suggests, the user decides
4. External failures degrade to a fallback, never to a crash
"""

__version__ = "1.0.0"
__author__ = "BizBoard Team"

"""
CLI entry points for the swing signal engine.

Provides command-line interfaces for:
- Range analysis, point evaluation and fleet scans (swing)
- Daily candidate ranking (swing daily)
- Parameter and preset reference (params)
"""

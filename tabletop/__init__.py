"""
Tabletop League Engine - Core Package

This package contains the core modules for:
- Round pairing (tabletop.pairing)
- Placement points and bonuses (tabletop.rules)
- Elo rating updates (tabletop.elo)
- Table scoring and standings (tabletop.scoring, tabletop.standings)
- Shared configuration and utilities
"""

from tabletop.config import *

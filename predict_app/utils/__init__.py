"""
Utility functions module.

Display formatting shared by the view projection:
- Currency amounts render as "KSh 1,234" or "KSh 1,234.5" (up to two decimals)
- Probabilities render as percentages with one decimal ("60.0%")
- Dates render as ISO calendar dates; unparseable input is shown as-is
"""

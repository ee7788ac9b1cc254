"""
Package marker for source code under `src.landed_cost`.
It groups the customs landed-cost calculator, item allocation, duty distribution and variance modules.
The arithmetic lives in the sibling modules; this file intentionally stays lightweight.
"""

"""
Top-level package for the landed-cost service.
`src.landed_cost` holds the pure calculator; `src.api` and `src.common` wrap it in an HTTP service.
"""

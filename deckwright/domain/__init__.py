"""
Domain layer: plan schema, theme catalog, tiers and error kinds.
"""

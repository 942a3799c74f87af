"""
Indicator result models.
"""

"""
HTTP routes for the business task dashboard.
"""

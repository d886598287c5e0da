"""Dashboard pages for the Station Observation Map.

Pages are discovered by Dash (`use_pages=True`); each registers one screen
variant.
"""

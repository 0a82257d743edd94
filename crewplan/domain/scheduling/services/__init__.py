"""
Domain services of the placement engine.

Import from the individual modules; the timeline and placement modules
depend on the entities package, which itself uses ``day_keys``.
"""

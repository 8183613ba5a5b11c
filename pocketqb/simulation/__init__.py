"""Play simulation core.

Layers, leaves first:
- core: vectors, field geometry, scheduler, events, phase machine
- physics: ball flight
- systems: timing windows, coverage, route running, pass outcomes
- plays: routes and the play catalog
"""

"""
db/ - Database Layer
====================
Handles PostgreSQL connections, schema initialization, fixture seeding,
and the JSON fixture tables used by the fixture backend.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""

"""Infrastructure layer — graph store access.

This layer depends on stdlib and third-party libs (the neo4j driver).
It converts driver objects into the raw graph shapes of
:mod:`mqtopo.domain.graph` and never imports from services, commands,
or output.
"""

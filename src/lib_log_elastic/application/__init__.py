"""Application layer: ports and use cases of the routing core."""

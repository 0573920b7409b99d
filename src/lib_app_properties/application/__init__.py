"""Application layer: ports, the layered loader, and the expression resolver."""

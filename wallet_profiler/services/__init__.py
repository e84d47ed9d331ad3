"""Service layer: catalog, networks, wallet analysis and recommendations."""

"""HTTP layer: routers and request dependencies."""

"""Movie catalog: REST API service and client."""

"""HTTP interface layer: FastAPI app, routes and middleware."""

"""GraphQL Layer - strawberry schema mounted on the truapi FastAPI app."""

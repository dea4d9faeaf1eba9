from resumegen.api import (
    catalog_routes,
    generate_routes,
    llm_routes,
)

__all__ = [
    "catalog_routes",
    "generate_routes",
    "llm_routes",
]

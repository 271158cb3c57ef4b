"""HTTP surface: routers, schemas, dependencies and error mapping."""

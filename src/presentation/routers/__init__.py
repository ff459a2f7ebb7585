"""HTTP routers: system endpoints, generated facade routes and sharing."""

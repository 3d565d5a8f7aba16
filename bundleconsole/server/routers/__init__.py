"""HTTP routers of the console."""

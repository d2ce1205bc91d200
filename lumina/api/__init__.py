"""HTTP routers for the Lumina views."""

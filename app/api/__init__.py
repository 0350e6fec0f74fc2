"""API package: versioned routers live under app.api.v1"""

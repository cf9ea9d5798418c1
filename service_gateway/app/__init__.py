"""
API Gateway Service package for GeoProxy.

The gateway issues bearer tokens and fronts the geocoding provider:
- Authentication: register/login against a single stored credential
- Token verification on the address routes
- Normalization of provider results into canonical addresses
- Circuit-breaking and deadlines for provider calls

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.auth: Credential store, password hashing, token issuer.
- app.adapters: Upstream geocoding provider clients.
- app.domain: Models, the auth gate, and the geocode adapter.
"""

"""
Auth0 sign-in for the Scoop web app.

Design goals:
- Provider callback completes in one sequential pass (no retries).
- Internal side calls (admin log, JWT exchange) are best-effort.
- Cookie-based session (HttpOnly) for same-origin UI; internal JWT mirrored to the client.
"""

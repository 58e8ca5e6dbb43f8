"""Authentication and sessions.

Learn: Sessions are stateless. Login/signup mint an HS256 JWT and hand
it to the browser in an HttpOnly `token` cookie; every protected request
verifies the cookie and gets a typed Identity back. Nothing about a
session is stored server-side, so logout only clears the cookie and a
token stays valid until it expires.
"""

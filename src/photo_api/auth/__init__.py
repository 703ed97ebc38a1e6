"""Authentication.

Users present a JWT as `Authorization: Bearer <token>`. The token carries
the user's id and email; every request re-verifies it and re-checks that
the user still exists.
"""

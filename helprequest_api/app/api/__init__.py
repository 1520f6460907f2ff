"""
API package.

``routing`` holds the route table helpers shared by every endpoint
module; ``v1`` holds the endpoint modules themselves.
"""

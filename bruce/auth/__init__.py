"""
Spotify login: authorization-code flow and stored credentials.
"""

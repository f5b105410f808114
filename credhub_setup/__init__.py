"""
Platform setup helpers for exposing CredHub to applications through Cloud Controller.
"""

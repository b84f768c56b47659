"""
Service layer abstraction.

Services encapsulate the persistence logic for a domain so that API
handlers never issue SQL themselves.
"""

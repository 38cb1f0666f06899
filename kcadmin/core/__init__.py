"""Core client logic: Keycloak Admin API access and input validation.

Module Structure:
    - keycloak/     : token handling, dispatch, response shapes, resource services
    - validators.py : input validation shared by resource services
"""

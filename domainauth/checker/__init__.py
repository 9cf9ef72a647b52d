"""
Checker package for the domain authentication checker.

Provides the TXT resolver wrapper, the tag=value record parser, the
DMARC and DKIM validators, remediation suggestions and the engine that
runs both checks for a domain.
"""

"""
WSGI entry point for the domain authentication checker.

=============================================================================
DEPLOYMENT
=============================================================================

Point the WSGI server at ``wsgi:app``, for example:

  gunicorn wsgi:app

Environment variables (see domainauth/config.py):

  SECRET_KEY              Flask secret key
  DNS_RESOLVERS           Comma-separated nameserver IPs (default 8.8.8.8,1.1.1.1)
  DNS_TIMEOUT_SECONDS     Per-query DNS deadline in seconds (default 5.0)
  DEFAULT_DKIM_SELECTOR   Selector used when a request omits one (default mail)

Outbound DNS (UDP/TCP port 53) must be allowed; otherwise every check
reports a DNS timeout.

=============================================================================
LOCAL DEVELOPMENT
=============================================================================

Run the Flask development server with:

  python wsgi.py

Then query http://127.0.0.1:5000/api/v1/domain-auth?domain=example.com&selector=mail

For testing:

  pip install -e ".[test]"
  pytest tests/ -v
  pytest tests/ --cov=domainauth --cov-report=term-missing

=============================================================================
"""

from __future__ import annotations

from domainauth import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True)

# perfmon/__init__.py
"""
Affiliate Performance Monitor - shared package

Modules:
- config: environment / secrets configuration
- db: engine singleton and query helpers
- schema: table definitions
- auth: sign-in, sign-up and the session context
- access_control: page and data-level authorization
- forms: pydantic form schemas and submission flow
- layout: page scaffolding, navigation and list states
- management, reports, dashboard: feature packages
"""

__version__ = '1.0.0'

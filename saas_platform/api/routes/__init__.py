"""
API route modules.

This package contains subrouters for:
- Auth: login, refresh, logout and current user
- Tenants: tenant administration
- Customers: tenant-scoped customer management
- Users: tenant-scoped user management
- User roles: role assignment

Routers are included from saas_platform.api.main (under the /api/v1 prefix).
"""

"""Multi-tenant SaaS back-office API: tenants, customers, users and role assignments."""

__version__ = "1.0.0"

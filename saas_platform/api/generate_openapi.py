import json
import os

from saas_platform.api.main import app

# Get the OpenAPI schema (note: all REST routes are under /api/v1)
openapi_schema = app.openapi()

# Document the tenant header once at the top level for client generators
openapi_schema["x-tenant-header"] = {
    "name": "X-Tenant-ID",
    "format": "uuid",
    "required_for": ["/api/v1/customers", "/api/v1/users", "/api/v1/user-roles", "/api/v1/auth"],
    "note": "Must match the tenant_id claim of the bearer token.",
}

# Write to file
output_dir = "interfaces"
os.makedirs(output_dir, exist_ok=True)
output_path = os.path.join(output_dir, "openapi.json")

with open(output_path, "w") as f:
    json.dump(openapi_schema, f, indent=2)

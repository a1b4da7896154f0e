"""
Write the service's OpenAPI document to interfaces/openapi.json.

Usage:
    python -m src.api.generate_openapi
"""
import json
import os

from src.api.main import app

# Get the OpenAPI schema (note: all REST routes are under /api/v1)
openapi_schema = app.openapi()

# Document the accepted storage reference shapes for client generators
openapi_schema["x-storage-reference-formats"] = [
    {"shape": "query-token", "example": "https://store/upload?token=ab12ab12-0000-4fff-8fff-abcdefabcdef"},
    {"shape": "path-segment", "example": "https://store/objects/ab12ab12-0000-4fff-8fff-abcdefabcdef?sig=1"},
    {"shape": "bare-hex", "example": "ab12ab1200004fff8fffabcdefabcdef"},
    {"shape": "canonical", "example": "ab12ab12-0000-4fff-8fff-abcdefabcdef"},
]

output_dir = "interfaces"
os.makedirs(output_dir, exist_ok=True)
output_path = os.path.join(output_dir, "openapi.json")

with open(output_path, "w") as f:
    json.dump(openapi_schema, f, indent=2)

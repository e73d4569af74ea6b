#!/usr/bin/env python3
"""
Write the OpenAPI schema of the monitoring API to docs/openapi.json so the
dashboard team can generate a client without running the server.
"""
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from main import app


def export(output_file: Path) -> dict:
    schema = app.openapi()
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w") as f:
        json.dump(schema, f, indent=2)
    return schema


if __name__ == "__main__":
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / "docs" / "openapi.json"
    schema = export(target)
    print(f"OpenAPI schema written to {target}")
    print(f"  {schema.get('info', {}).get('title')}: {len(schema.get('paths', {}))} paths")

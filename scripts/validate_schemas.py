"""Checks that every request schema under app/schemas loads and is valid."""

from pathlib import Path

from app.validation.validator import SchemaRegistry

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "app" / "schemas"


def validate() -> None:
    registry = SchemaRegistry(SCHEMA_DIR)
    print(f"{len(registry.names())} schemas ok: {', '.join(registry.names())}")


if __name__ == "__main__":
    validate()

"""Export every CROPCO_* environment variable the API reads as JSON.

Usage: export_settings.py [OUTPUT_PATH]

Without a path the document is written to stdout.
"""

import json
import sys
from pathlib import Path
from typing import Type

from pydantic import SecretStr
from pydantic_core import PydanticUndefined
from pydantic_settings import BaseSettings

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

from infrastructure.settings import (  # noqa: E402
    AuthSettings,
    CipherSettings,
    CORSSettings,
    DatabaseSettings,
    Settings,
    TenantDatabaseSettings,
)

SETTINGS_CLASSES: list[Type[BaseSettings]] = [
    Settings,
    DatabaseSettings,
    TenantDatabaseSettings,
    CipherSettings,
    AuthSettings,
    CORSSettings,
]


def _display_default(default, is_required: bool):
    if isinstance(default, SecretStr):
        # Secret defaults are never printed
        return None if is_required else "********"
    if is_required or default is None:
        return None
    if isinstance(default, (list, dict, bool, int, float)):
        return default
    return str(default)


def get_model_metadata(settings_class: Type[BaseSettings]) -> dict:
    prefix = settings_class.model_config.get("env_prefix", "")
    properties = []

    for name, field in settings_class.model_fields.items():
        type_name = getattr(field.annotation, "__name__", str(field.annotation))
        if field.default_factory is not None:
            default = field.default_factory()
        else:
            default = field.get_default()

        # A deployment secret defaulting to "" must be set explicitly.
        is_required = default is PydanticUndefined or (
            isinstance(default, SecretStr) and default.get_secret_value() == ""
        )

        properties.append(
            {
                "env_var": f"{prefix}{name.upper()}",
                "type": "Secret" if "Secret" in type_name else type_name,
                "default": _display_default(default, is_required),
                "required": is_required,
                "description": field.description or "",
            }
        )

    return {
        "class_name": settings_class.__name__,
        "prefix": prefix,
        "doc": settings_class.__doc__ or "",
        "properties": properties,
    }


def export_settings(output_path: Path | None = None) -> None:
    data = {cls.__name__: get_model_metadata(cls) for cls in SETTINGS_CLASSES}
    document = json.dumps(data, indent=2)

    if output_path is None:
        print(document)
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(document + "\n")
    print(f"Exported settings to {output_path}", file=sys.stderr)


if __name__ == "__main__":
    export_settings(Path(sys.argv[1]) if len(sys.argv) > 1 else None)

#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from predict_app.config.loader import ConfigLoader
from predict_app.config.validation import ConfigValidator, ValidationError


def validate_merged_config(overrides=None) -> List[ValidationError]:
    """Validate defaults + client.yaml + the given overrides."""
    loader = ConfigLoader.create()
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating Predict client configuration...")

    all_valid = True

    print("\n📄 Validating client.yaml...")
    try:
        errors = validate_merged_config()
        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print("✅ client.yaml configuration is valid")
    except Exception as e:
        print(f"❌ Error validating client.yaml: {e}")
        all_valid = False

    print("\n📋 Testing explicit overrides...")
    test_overrides = {
        "api": {"timeout_seconds": 10},
        "markets": {"page_limit": 12, "default_sort": "volume"},
    }
    try:
        errors = validate_merged_config(test_overrides)
        if errors:
            print("❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print("✅ Override validation passed")
    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()

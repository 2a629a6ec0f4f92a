#!/usr/bin/env python3
"""Validate every run configuration shipped in config/runs."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from optcycle.config.loader import ConfigLoader
from optcycle.config.validation import ConfigValidator, ValidationError


def validate_run_config(loader: ConfigLoader, run_name: str) -> List[ValidationError]:
    """Validate the merged configuration for a named run."""
    config = loader.merge_config(run_name)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating optcycle run configurations...")

    loader = ConfigLoader.create()
    run_names = loader.available_runs()

    if not run_names:
        print(f"❌ No run configurations found in {loader.config_dir / 'runs'}")
        sys.exit(1)

    all_valid = True

    for run_name in run_names:
        print(f"\n📊 Validating {run_name}...")

        errors = validate_run_config(loader, run_name)
        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print(f"✅ {run_name} configuration is valid")

    if all_valid:
        print(f"\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()

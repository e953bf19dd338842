#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from points_app.config.loader import ConfigLoader
from points_app.config.validation import ConfigValidator, ValidationError


def validate_network_config(config_dir: Optional[Path] = None) -> List[ValidationError]:
    """Validate the merged configuration for a config directory."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating points app configuration in {loader.config_dir}...")

    all_valid = True

    errors = validate_network_config(config_dir)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        config = loader.merge_config()
        print(f"✅ RPC endpoint: {config['chain']['rpc_url']}")
        print(f"✅ Universal points: {config['contracts']['universal_points_address']}")
        print(f"✅ Points exchange: {config['contracts']['points_exchange_address']}")
        print(f"✅ Confirmation timeout: {config['confirmation']['timeout_seconds']}s")
        if not config["signer"]["private_key"]:
            print("ℹ️  No POINTS_PRIVATE_KEY set; transactions will be signed by the node")

    if all_valid:
        print("\n🎉 Configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

from regime_app.config.loader import ConfigLoader
from regime_app.config.validation import ConfigValidator, ValidationError


def validate_symbol_config(loader: ConfigLoader, symbol: str) -> List[ValidationError]:
    """Validate merged configuration for a specific symbol."""
    config = loader.merge_config(symbol)
    return ConfigValidator.validate_config(config)


def main(config_dir: Optional[str] = None) -> int:
    """Validate every configured symbol and the account risk settings."""
    loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
    print(f"🔍 Validating configuration in {loader.config_dir}...")

    symbols = loader.configured_symbols()
    symbols.append("UNKNOWN-SYMBOL")  # Should use defaults

    all_valid = True

    for symbol in symbols:
        errors = validate_symbol_config(loader, symbol)
        if errors:
            print(f"❌ {symbol}: {len(errors)} validation errors")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            print(f"✅ {symbol} configuration is valid")

    try:
        risk_config = loader.load_risk_config()
        print(f"✅ Risk settings valid (daily limit: {risk_config.daily_risk_limit})")
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Risk settings: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        return 0

    print("\n❌ Configuration validation failed!")
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else None))

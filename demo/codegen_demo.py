#!/usr/bin/env python3
"""
Demonstration of Chibi Izumi Codegen.

This demo shows:
1. Interface tokens declared with @Token on ABC and Protocol classes
2. Implementations bound to interfaces with @Reflect
3. Constructor, dataclass and factory function dependency inference
4. Singleton, scoped and transient registrations
5. Deterministic output across repeated runs
"""

import logging
import tempfile
from pathlib import Path

from izumi.codegen import CodegenError, generate_di


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sources = Path(__file__).parent / "shop"

    print("=== Chibi Izumi Codegen Demo ===\n")

    with tempfile.TemporaryDirectory() as tmp:
        output = Path(tmp) / "di_setup.py"

        try:
            first = generate_di([sources], output)
            second = generate_di([sources], output)
        except CodegenError as e:
            print(f"Generation failed: {e}")
            raise

        print(first.code)
        print(f"Summary: {first.summary}")
        print(f"Identical on regeneration: {first.code == second.code}")

        print("\nInjectables:")
        for injectable in first.injectables:
            print(f"  {injectable}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Development scripts for chibi-izumi-codegen.

These scripts integrate with uv to run various checks and tests.
"""

import subprocess
import sys
from pathlib import Path


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if successful."""
    print(f"\n🔄 {description}...")
    print(f"Running: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True, capture_output=False)
        print(f"✅ {description} passed")
        return True
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False


def run_all(checks: list[tuple[list[str], str]]) -> int:
    """Run every check, returning 0 only if all of them passed."""
    all_passed = True
    for cmd, desc in checks:
        if not run_command(cmd, desc):
            all_passed = False
    return 0 if all_passed else 1


def run_tests() -> int:
    """Run the test suite."""
    print("🧪 Running test suite")
    return run_all([(["uv", "run", "pytest", "-v"], "Tests")])


def run_lint() -> int:
    """Run linting checks."""
    print("🔍 Running linting checks")

    result = run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )
    if result:
        print("\n💡 To auto-fix formatting issues, run: uv run ruff format .")
        print("💡 To auto-fix some linting issues, run: uv run ruff check --fix .")
    return result


def run_typecheck() -> int:
    """Run type checking with both mypy and pyright."""
    print("🔬 Running type checking")

    return run_all(
        [
            (["uv", "run", "mypy", "src/izumi/codegen/"], "MyPy type checking"),
            (["uv", "run", "pyright", "src/izumi/codegen/"], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    """Run all demo scripts to ensure they work correctly."""
    print("🎭 Running demo scripts")

    demo_dir = Path("demo")
    if not demo_dir.exists():
        print("❌ Demo directory not found")
        return 1

    demo_files = [f for f in sorted(demo_dir.glob("*.py")) if not f.name.startswith("_")]
    if not demo_files:
        print("⚠️  No demo files found in demo directory")
        return 0

    return run_all([(["uv", "run", "python", str(f)], f"Demo: {f.name}") for f in demo_files])


COMMANDS = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
}


def check_all() -> int:
    """Run all checks: tests, linting, type checking and demos."""
    print("🚀 Running all checks for chibi-izumi-codegen")
    print("=" * 50)

    results = {}
    for name, func in [("Tests", run_tests), ("Linting", run_lint), ("Type Checking", run_typecheck), ("Demos", run_demos)]:
        print(f"\n{'=' * 20} {name} {'=' * 20}")
        results[name] = func() == 0

    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"{name:<15} {status}")

    if all(results.values()):
        print("\n🎉 All checks passed!")
        return 0
    print("\n💥 Some checks failed. Please fix the issues above.")
    return 1


if __name__ == "__main__":
    available = ", ".join([*COMMANDS, "check"])
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == "check":
            sys.exit(check_all())
        if command in COMMANDS:
            sys.exit(COMMANDS[command]())
        print(f"Unknown command: {command}")
        print(f"Available commands: {available}")
        sys.exit(1)
    else:
        print(f"Available commands: {available}")
        print("Usage: python scripts.py <command>")

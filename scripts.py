#!/usr/bin/env python3
"""
Development scripts for the instancer project.

These scripts integrate with uv to run the test suite, linters, type
checkers, demos and the README examples.
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

PACKAGE_DIR = "src/instancer/"


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
    """Run every command, even after a failure; 0 if all passed."""
    results = [run_command(cmd, desc) for cmd, desc in checks]
    return 0 if all(results) else 1


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
            (["uv", "run", "mypy", PACKAGE_DIR], "MyPy type checking"),
            (["uv", "run", "pyright", PACKAGE_DIR], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    """Run all demo scripts to make sure they still work."""
    print("🎭 Running demo scripts")

    demo_files = sorted(f for f in Path("demo").glob("*.py") if not f.name.startswith("_"))
    if not demo_files:
        print("⚠️  No demo files found in demo directory")
        return 0

    return run_all([(["uv", "run", "python", str(f)], f"Demo: {f.name}") for f in demo_files])


def run_readme_validation() -> int:
    """Validate that the code examples in README.md run."""
    print("📖 Validating README code examples")

    readme_path = Path("README.md")
    if not readme_path.exists():
        print("❌ README.md not found")
        return 1

    test_file_path = Path("test_readme.py")
    test_file_path.unlink(missing_ok=True)
    try:
        gen_cmd = ["uv", "run", "phmdoctest", str(readme_path), "--outfile", str(test_file_path)]
        if not run_command(gen_cmd, "Generating README tests"):
            return 1
        return run_all([(["uv", "run", "pytest", str(test_file_path), "-v"], "README code examples")])
    finally:
        test_file_path.unlink(missing_ok=True)


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
}


def check_all() -> int:
    """Run all checks and print a summary."""
    print("🚀 Running all checks for instancer")
    print("=" * 50)

    results = {}
    for name, func in COMMANDS.items():
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
    if len(sys.argv) < 2:
        print(f"Available commands: {available}")
        print("Usage: python scripts.py <command>")
        sys.exit(0)

    command = sys.argv[1]
    if command == "check":
        sys.exit(check_all())
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {available}")
        sys.exit(1)
    sys.exit(COMMANDS[command]())

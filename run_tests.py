#!/usr/bin/env python3
"""
Quick test runner script
Usage: python run_tests.py [all|unit|integration|fast|coverage|module NAME]
"""
import subprocess
import sys
from pathlib import Path

MODULES = ["config", "classify", "parser", "transformers", "metrics", "main"]

SUITES = {
    "all": ["tests/"],
    "unit": ["tests/", "-m", "unit"],
    "integration": ["tests/", "-m", "integration"],
    "fast": ["tests/", "-m", "not slow"],
    "coverage": ["tests/", "--cov=src/vintalyze", "--cov-report=html", "--cov-report=term"],
}


def pytest_args(argv):
    """Map command line words to pytest arguments, or None when unknown"""
    command = argv[0] if argv else "all"
    if command == "module":
        name = argv[1] if len(argv) > 1 else ""
        return [f"tests/test_{name}.py"] if name in MODULES else None
    return SUITES.get(command)


def main():
    args = pytest_args(sys.argv[1:])
    if args is None:
        print(__doc__.strip())
        print(f"Modules: {', '.join(MODULES)}")
        sys.exit(2)

    root = Path(__file__).parent
    sys.exit(subprocess.call([sys.executable, "-m", "pytest", "-v", *args], cwd=root))


if __name__ == "__main__":
    main()

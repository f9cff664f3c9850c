#!/usr/bin/env python3
"""
fasel-cli - Main entry point
Search FaselHD and resolve movie/episode streams from the terminal.
"""
import sys

try:
    from fasel.cli import main
except ImportError as e:
    print(f"Error: Failed to import fasel package. {e}")
    print("Make sure you have installed the package correctly:")
    print("  pip install -e .")
    sys.exit(1)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)

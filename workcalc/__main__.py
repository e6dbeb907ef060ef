#!/usr/bin/env python3
"""
Convenience entry point for running workcalc directly.

Usage: python -m workcalc [command] [options]
"""

from workcalc.cli.app import app

if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""
Convenience entry point for running seatime directly.

Usage: python main.py [command] [options]
"""

from seatime.cli.app import app

if __name__ == "__main__":
    app()

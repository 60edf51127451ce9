#!/usr/bin/env python3
"""
Main entry point for the browser presence module.
This allows running the module with: python -m browser_presence
"""

from browser_presence.core import main

if __name__ == "__main__":
    main()

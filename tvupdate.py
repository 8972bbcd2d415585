"""
Launcher for running tvupdate from a source checkout
"""

from tvupdate.cli import main

if __name__ == "__main__":
    main()

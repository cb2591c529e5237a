# treeforge/main.py
import sys
import os

# Ensure the package root is discoverable when this file is run directly
if __package__ is None:
    path = os.path.realpath(os.path.abspath(__file__))
    sys.path.insert(0, os.path.dirname(os.path.dirname(path)))

from treeforge.cli import app

def run():
    app()

if __name__ == "__main__":
    run()

"""
Main entry point for the portprobe application.
"""
import sys

from portprobe.app import main

def main_entry():
    """
    Main function to run portprobe from the command line.
    """
    sys.exit(main())

if __name__ == "__main__":
    main_entry()

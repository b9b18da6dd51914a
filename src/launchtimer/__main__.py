"""
Main entrypoint.

Usage:
    python -m launchtimer replay run.csv        # replay a recording
    python -m launchtimer simulate              # synthetic 20 m/s² launch
"""
from launchtimer.scripts.replay import main

if __name__ == "__main__":
    raise SystemExit(main())

"""peopledb command-line interface (``peopledb`` entry point)."""

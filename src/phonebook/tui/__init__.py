"""Interactive terminal screen."""

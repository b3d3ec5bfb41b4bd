"""Services package for the Pi relay."""

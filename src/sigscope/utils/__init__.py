"""Small helpers shared by the core modules and the command line."""

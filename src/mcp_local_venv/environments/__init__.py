"""Environment management module for creating and driving local virtual environments.

Handles the marker-based lifecycle of environment directories, package
installation and listing, and running scripts inside an activated environment."""

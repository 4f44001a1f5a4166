"""mapgeo: geometry engine behind the neighborhood map."""

__version__ = "0.1.0"

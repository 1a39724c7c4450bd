"""A small path tracer: shapes, materials, area lights, instancing, renderers and PNG output."""

__version__ = "0.1.0"
"""fridagen - Frida hook snippets from compiled class descriptors."""

__version__ = "0.1.0"

"""davmount - provision davfs2 WebDAV mounts on Linux hosts."""

__version__ = "0.1.0"

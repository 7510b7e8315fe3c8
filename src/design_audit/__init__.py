"""Design quality audit: accessibility, performance, mobile UX, visual consistency and interaction design."""

__version__ = "0.1.0"

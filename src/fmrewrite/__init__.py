"""fmrewrite — batch front-matter rewriter for static-site content."""

__version__ = "0.1.0"

"""Side-by-side rendering of unified diffs for pull request review replies."""

__version__ = "1.0.0"

"""imagechain -- Composable image treatment chains with stabilized capture.

This package lets a caller assemble an ordered sequence of image
treatments, push a single image through it while keeping every
intermediate result, and read frames from flaky live cameras through
a skip/retry/validate protocol that filters out warm-up garbage.
"""

__version__ = "0.1.0"

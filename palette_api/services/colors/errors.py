"""Exceptions raised by the palette extraction core."""


class PaletteError(Exception):
    """Base exception for palette extraction errors."""

    pass


class InvalidInputError(PaletteError, ValueError):
    """Raised when pixel input is empty or malformed."""

    pass


class ClusteringDidNotConvergeError(PaletteError, RuntimeError):
    """Raised when k-means hits its iteration bound before converging."""

    def __init__(self, iterations: int):
        self.iterations = iterations
        super().__init__(f"K-means did not converge after {iterations} iterations")


class InsufficientDistinctColorsError(PaletteError, RuntimeError):
    """Raised when k distinct initial centroids cannot be drawn."""

    def __init__(self, k: int, found: int):
        self.k = k
        self.found = found
        super().__init__(f"Insufficient distinct colors: found {found} < {k}")

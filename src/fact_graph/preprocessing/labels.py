"""Ground-truth label extraction from document file names."""


def true_label(name: str) -> str:
    """Extract the true cluster identifier from a document name.

    Pattern: everything before the first hyphen.
    Example: ``'cats-0042.txt'`` -> ``'cats'``

    A name without a hyphen is its own label.
    """
    return name.split("-", 1)[0]


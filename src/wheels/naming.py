"""Package name normalization shared by every index lookup."""


def normalize_name(name: str) -> str:
    """Return the canonical form of a package name.

    Lowercases and folds ``_`` and ``.`` to ``-`` so names from different
    indexes compare equal. Idempotent: normalizing twice changes nothing.

    >>> normalize_name("Zope.Interface")
    'zope-interface'
    """
    return name.lower().replace("_", "-").replace(".", "-")

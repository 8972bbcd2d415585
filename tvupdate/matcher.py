"""
Fuzzy comparison of release file names
"""

EZTV_SUFFIX = "[eztv]"


def _split_extension(name: str) -> tuple[str, str]:
    """Split on the last dot, extension is empty when there is none"""
    stem, dot, ext = name.rpartition(".")
    if not dot:
        return name, ""
    return stem, ext


def fuzzy_match(a: str, b: str) -> bool:
    """
    Check whether two file names look like the same release

    Case is ignored and an "[eztv]" tag right before the extension may
    appear on either side. Different extensions never match.
    """
    a, b = a.lower(), b.lower()
    if a == b:
        return True

    stem_a, ext_a = _split_extension(a)
    stem_b, ext_b = _split_extension(b)
    if ext_a != ext_b:
        return False

    suffix = f".{ext_a}" if ext_a else ""
    if stem_a.endswith(EZTV_SUFFIX):
        if fuzzy_match(stem_a[: -len(EZTV_SUFFIX)] + suffix, stem_b + suffix):
            return True
    if stem_b.endswith(EZTV_SUFFIX):
        if fuzzy_match(stem_a + suffix, stem_b[: -len(EZTV_SUFFIX)] + suffix):
            return True
    return False

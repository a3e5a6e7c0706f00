"""
Crate name variant generation for cratepin.

Registries treat ``-`` and ``_`` in crate names as distinct characters,
while users routinely type one for the other.  Before giving up on a
lookup, the resolver tries every spelling obtained by toggling the
separators of the requested name.
"""

from __future__ import annotations

from typing import List

from cratepin.constants import MAX_FUZZY_SEPARATORS, NAME_SEPARATORS


def gen_fuzzy_crate_names(crate_name: str) -> List[str]:
    """Generate all similar crate names.

    Every combination of ``-``/``_`` at the first
    :data:`~cratepin.constants.MAX_FUZZY_SEPARATORS` separator positions is
    produced; separators past that cap keep the character given.  The
    requested spelling is always first so that it is tried first.

    Args:
        crate_name: Name as requested by the user.

    Returns:
        Candidate spellings; ``2**k`` of them for ``k`` varied separators.

    Examples:

    ================  ==================================================
    input             output
    ================  ==================================================
    cargo             cargo
    cargo-edit        cargo-edit, cargo_edit
    parking_lot_core  parking_lot_core, parking-lot_core,
                      parking_lot-core, parking-lot-core
    ================  ==================================================
    """
    wildcard_indexes = [
        index for index, char in enumerate(crate_name) if char in NAME_SEPARATORS
    ][:MAX_FUZZY_SEPARATORS]

    if not wildcard_indexes:
        return [crate_name]

    chars = list(crate_name)
    result: List[str] = []
    for mask in range(2 ** len(wildcard_indexes)):
        for bit, wildcard_index in enumerate(wildcard_indexes):
            chars[wildcard_index] = "-" if (mask >> bit) & 1 else "_"
        result.append("".join(chars))

    # The requested spelling is always one of the generated variants
    position = result.index(crate_name)
    result[0], result[position] = result[position], result[0]
    return result

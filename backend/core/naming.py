"""
Sequence naming conventions — decide which sequence feeds a primary key.

Catalogs do not record which sequence generates a primary-key column, so the
binding is recovered from names. A convention normalizes the primary-key
constraint name and each candidate sequence name, and the two match when their
normalized forms are equal.
"""
import re
from typing import Iterable, Protocol


class SequenceNaming(Protocol):
    def match(self, constraint_name: str, sequence_names: Iterable[str]) -> str:
        """Return the sequence bound to ``constraint_name``, or "" when none is."""
        ...


class SuffixSequenceNaming:
    """Strip one conventional suffix from each name, drop underscores, compare."""

    def __init__(self, constraint_pattern: str, sequence_pattern: str):
        self.constraint_re = re.compile(constraint_pattern)
        self.sequence_re = re.compile(sequence_pattern)

    def normalize_constraint(self, name: str) -> str:
        return self.constraint_re.sub("", name, count=1).replace("_", "")

    def normalize_sequence(self, name: str) -> str:
        return self.sequence_re.sub("", name, count=1).replace("_", "")

    def match(self, constraint_name: str, sequence_names: Iterable[str]) -> str:
        if not constraint_name:
            return ""
        target = self.normalize_constraint(constraint_name)
        for seq in sorted(sequence_names):
            if self.normalize_sequence(seq) == target:
                return seq
        return ""


class ExactSequenceNaming:
    """Bind only ``<constraint>_seq``; for catalogs that name sequences after the key."""

    def match(self, constraint_name: str, sequence_names: Iterable[str]) -> str:
        if not constraint_name:
            return ""
        wanted = f"{constraint_name}_seq"
        return wanted if wanted in set(sequence_names) else ""


# rhn_channel_id_pk ~ rhn_channel_id_seq, suse_products_pkey ~ suse_products_id_seq
POSTGRES_SEQUENCE_NAMING = SuffixSequenceNaming(r"(_id)?_pk(ey)?", r"(_id)?_seq")

NAMING_CONVENTIONS: dict[str, SequenceNaming] = {
    "postgres": POSTGRES_SEQUENCE_NAMING,
    "exact": ExactSequenceNaming(),
}


def get_naming_convention(name: str) -> SequenceNaming:
    try:
        return NAMING_CONVENTIONS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown sequence naming convention '{name}'. "
            f"Choose one of: {', '.join(sorted(NAMING_CONVENTIONS))}"
        ) from None

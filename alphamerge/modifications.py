"""Residue modification descriptors.

This module provides a value object describing a residue modification
(identifier, names, terminal specificity, source classification, masses,
formulas and synonyms), plus a small set of built-in descriptors for the
most common modifications.

Key Features
------------
- Term specificity and source classification enums with their external names
- Value equality over all attributes (synonyms compared as a set)
- Built-in Carbamidomethyl, Oxidation, Acetyl, Phospho and Deamidation
- Lookup by identifier or synonym

Examples
--------
>>> mod = ResidueModification(id="Oxidation", origin="M", diff_mono_mass=15.994915)
>>> mod.add_synonym("Oxidation (M)")
>>> mod.set_term_specificity("Anywhere")
>>> get_modification("Carbamidomethyl").diff_formula
'C2H3NO'
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Set, Union

from .constants import (
    ACETYL_AVERAGE_MASS,
    ACETYL_MASS,
    CARBAMIDOMETHYL_AVERAGE_MASS,
    CARBAMIDOMETHYL_MASS,
    DEAMIDATION_AVERAGE_MASS,
    DEAMIDATION_MASS,
    OXIDATION_AVERAGE_MASS,
    OXIDATION_MASS,
    PHOSPHO_AVERAGE_MASS,
    PHOSPHO_MASS,
)
from .exceptions import InvalidParameter


# =============================================================================
# Enums
# =============================================================================

class TermSpecificity(Enum):
    """Position where the modification is allowed to occur."""
    ANYWHERE = "Anywhere"
    C_TERM = "C-term"
    N_TERM = "N-term"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "TermSpecificity":
        """Parse an external name such as "C-term" (case-insensitive)."""
        for member in cls:
            if member.value.lower() == name.strip().lower():
                return member
        raise InvalidParameter(
            f"Unknown term specificity: {name!r}. Use one of {[m.value for m in cls]}."
        )


class SourceClassification(Enum):
    """Classification of the modification's origin."""
    ARTIFACT = "Artifact"
    HYPOTHETICAL = "Hypothetical"
    NATURAL = "Natural"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "SourceClassification":
        """Parse an external name such as "Natural" (case-insensitive)."""
        for member in cls:
            if member.value.lower() == name.strip().lower():
                return member
        raise InvalidParameter(
            f"Unknown source classification: {name!r}. Use one of {[m.value for m in cls]}."
        )


# =============================================================================
# Modification Descriptor
# =============================================================================

@dataclass
class ResidueModification:
    """Representation of a residue modification.

    Attributes
    ----------
    id : str
        Identifier (primary key)
    name : str
        Display name, e.g. the PSI-MS label used by search engines
    full_name : str
        Full descriptive name
    term_specificity : TermSpecificity
        Where on the peptide the modification may occur
    source_classification : SourceClassification
        Artifact, hypothetical or natural
    origin : str
        One-letter code of the modified residue
    average_mass, mono_mass : float
        Masses of the modified residue
    diff_average_mass, diff_mono_mass : float
        Mass shifts caused by the modification
    formula, diff_formula : str
        Chemical formula of the modified residue and of the mass shift
    synonyms : Set[str]
        Alternative names (no duplicates)
    """

    id: str = ""
    name: str = ""
    full_name: str = ""
    term_specificity: TermSpecificity = TermSpecificity.ANYWHERE
    source_classification: SourceClassification = SourceClassification.ARTIFACT
    origin: str = ""
    average_mass: float = 0.0
    mono_mass: float = 0.0
    diff_average_mass: float = 0.0
    diff_mono_mass: float = 0.0
    formula: str = ""
    diff_formula: str = ""
    synonyms: Set[str] = field(default_factory=set)

    def __post_init__(self):
        if isinstance(self.term_specificity, str):
            self.term_specificity = TermSpecificity.from_name(self.term_specificity)
        if isinstance(self.source_classification, str):
            self.source_classification = SourceClassification.from_name(
                self.source_classification
            )
        self.synonyms = set(self.synonyms)

    def set_term_specificity(self, term_spec: Union[TermSpecificity, str]) -> None:
        if isinstance(term_spec, str):
            term_spec = TermSpecificity.from_name(term_spec)
        self.term_specificity = term_spec

    def term_specificity_name(self) -> str:
        return self.term_specificity.display_name

    def set_source_classification(
        self, classification: Union[SourceClassification, str]
    ) -> None:
        if isinstance(classification, str):
            classification = SourceClassification.from_name(classification)
        self.source_classification = classification

    def source_classification_name(self) -> str:
        return self.source_classification.display_name

    def set_synonyms(self, synonyms: Iterable[str]) -> None:
        self.synonyms = set(synonyms)

    def add_synonym(self, synonym: str) -> None:
        self.synonyms.add(synonym)

    def matches(self, name: str) -> bool:
        """True if ``name`` is the identifier, display name or a synonym."""
        return name == self.id or name == self.name or name in self.synonyms


# =============================================================================
# Built-in Modifications
# =============================================================================

COMMON_MODIFICATIONS: Dict[str, ResidueModification] = {
    mod.id: mod for mod in (
        ResidueModification(
            id="Carbamidomethyl",
            name="Carbamidomethyl",
            full_name="Iodoacetamide derivative",
            term_specificity=TermSpecificity.ANYWHERE,
            source_classification=SourceClassification.ARTIFACT,
            origin="C",
            diff_average_mass=CARBAMIDOMETHYL_AVERAGE_MASS,
            diff_mono_mass=CARBAMIDOMETHYL_MASS,
            diff_formula="C2H3NO",
            synonyms={"Carbamidomethyl (C)", "Unimod:4"},
        ),
        ResidueModification(
            id="Oxidation",
            name="Oxidation",
            full_name="Oxidation or Hydroxylation",
            term_specificity=TermSpecificity.ANYWHERE,
            source_classification=SourceClassification.ARTIFACT,
            origin="M",
            diff_average_mass=OXIDATION_AVERAGE_MASS,
            diff_mono_mass=OXIDATION_MASS,
            diff_formula="O",
            synonyms={"Oxidation (M)", "Unimod:35"},
        ),
        ResidueModification(
            id="Acetyl",
            name="Acetyl",
            full_name="Acetylation",
            term_specificity=TermSpecificity.N_TERM,
            source_classification=SourceClassification.NATURAL,
            origin="X",
            diff_average_mass=ACETYL_AVERAGE_MASS,
            diff_mono_mass=ACETYL_MASS,
            diff_formula="C2H2O",
            synonyms={"Acetyl (N-term)", "Unimod:1"},
        ),
        ResidueModification(
            id="Phospho",
            name="Phospho",
            full_name="Phosphorylation",
            term_specificity=TermSpecificity.ANYWHERE,
            source_classification=SourceClassification.NATURAL,
            origin="S",
            diff_average_mass=PHOSPHO_AVERAGE_MASS,
            diff_mono_mass=PHOSPHO_MASS,
            diff_formula="HO3P",
            synonyms={"Phospho (STY)", "Unimod:21"},
        ),
        ResidueModification(
            id="Deamidation",
            name="Deamidated",
            full_name="Deamidation",
            term_specificity=TermSpecificity.ANYWHERE,
            source_classification=SourceClassification.ARTIFACT,
            origin="N",
            diff_average_mass=DEAMIDATION_AVERAGE_MASS,
            diff_mono_mass=DEAMIDATION_MASS,
            diff_formula="H-1N-1O",
            synonyms={"Deamidated (NQ)", "Unimod:7"},
        ),
    )
}


def get_modification(name: str) -> ResidueModification:
    """Look up a built-in modification by identifier, name or synonym.

    Returns a copy; the built-in table is not changed by edits to it.

    Raises
    ------
    KeyError
        If no built-in modification matches
    """
    if name in COMMON_MODIFICATIONS:
        return replace(COMMON_MODIFICATIONS[name])
    for mod in COMMON_MODIFICATIONS.values():
        if mod.matches(name):
            return replace(mod)
    raise KeyError(f"Unknown modification: {name}")

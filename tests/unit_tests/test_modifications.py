"""Unit tests for residue modification descriptors."""

import pytest

from alphamerge.constants import CARBAMIDOMETHYL_MASS, OXIDATION_MASS
from alphamerge.exceptions import InvalidParameter
from alphamerge.modifications import (
    COMMON_MODIFICATIONS,
    ResidueModification,
    SourceClassification,
    TermSpecificity,
    get_modification,
)


class TestEnums:
    """Test external names of the enums."""

    @pytest.mark.parametrize("name,expected", [
        ("Anywhere", TermSpecificity.ANYWHERE),
        ("C-term", TermSpecificity.C_TERM),
        ("n-term", TermSpecificity.N_TERM),
        (" N-TERM ", TermSpecificity.N_TERM),
    ])
    def test_term_specificity_from_name(self, name, expected):
        assert TermSpecificity.from_name(name) is expected

    def test_term_specificity_display_name(self):
        assert TermSpecificity.C_TERM.display_name == "C-term"

    @pytest.mark.parametrize("name", ["Artifact", "Hypothetical", "natural"])
    def test_source_classification_from_name(self, name):
        member = SourceClassification.from_name(name)
        assert member.display_name.lower() == name.lower()

    def test_unknown_names(self):
        with pytest.raises(InvalidParameter):
            TermSpecificity.from_name("Middle")
        with pytest.raises(InvalidParameter):
            SourceClassification.from_name("Synthetic")


class TestResidueModification:
    """Test the modification value object."""

    def test_defaults(self):
        mod = ResidueModification()
        assert mod.term_specificity is TermSpecificity.ANYWHERE
        assert mod.source_classification is SourceClassification.ARTIFACT
        assert mod.synonyms == set()

    def test_string_enums_in_constructor(self):
        mod = ResidueModification(
            id="Acetyl", term_specificity="N-term", source_classification="Natural"
        )
        assert mod.term_specificity is TermSpecificity.N_TERM
        assert mod.source_classification_name() == "Natural"

    def test_setters(self):
        mod = ResidueModification(id="Oxidation")
        mod.set_term_specificity("C-term")
        mod.set_source_classification(SourceClassification.HYPOTHETICAL)
        assert mod.term_specificity_name() == "C-term"
        assert mod.source_classification_name() == "Hypothetical"

    def test_invalid_setter_keeps_value(self):
        mod = ResidueModification(id="Oxidation")
        with pytest.raises(InvalidParameter):
            mod.set_term_specificity("Middle")
        assert mod.term_specificity is TermSpecificity.ANYWHERE

    def test_synonyms_are_a_set(self):
        mod = ResidueModification(id="Oxidation")
        mod.add_synonym("Ox")
        mod.add_synonym("Ox")
        assert mod.synonyms == {"Ox"}

    def test_equality_ignores_synonym_order(self):
        first = ResidueModification(id="X", origin="M")
        second = ResidueModification(id="X", origin="M")
        first.set_synonyms(["a", "b"])
        second.set_synonyms(["b", "a"])
        assert first == second

    def test_inequality(self):
        base = ResidueModification(id="X", origin="M", diff_mono_mass=1.0)
        assert base != ResidueModification(id="X", origin="C", diff_mono_mass=1.0)
        assert base != ResidueModification(id="X", origin="M", diff_mono_mass=2.0)

    def test_matches(self):
        mod = ResidueModification(id="Deamidation", name="Deamidated", synonyms=["Unimod:7"])
        assert mod.matches("Deamidation")
        assert mod.matches("Deamidated")
        assert mod.matches("Unimod:7")
        assert not mod.matches("Oxidation")


class TestCommonModifications:
    """Test built-in descriptors and lookup."""

    def test_builtins_present(self):
        assert set(COMMON_MODIFICATIONS) == {
            "Carbamidomethyl", "Oxidation", "Acetyl", "Phospho", "Deamidation"
        }

    def test_masses_from_constants(self):
        assert COMMON_MODIFICATIONS["Carbamidomethyl"].diff_mono_mass == CARBAMIDOMETHYL_MASS
        assert COMMON_MODIFICATIONS["Oxidation"].diff_mono_mass == OXIDATION_MASS

    def test_lookup_by_synonym(self):
        assert get_modification("Unimod:4") == COMMON_MODIFICATIONS["Carbamidomethyl"]
        assert get_modification("Deamidated").origin == "N"
        assert get_modification("Acetyl").term_specificity is TermSpecificity.N_TERM

    def test_lookup_returns_copy(self):
        mod = get_modification("Oxidation")
        mod.add_synonym("Ox")
        mod.diff_mono_mass = 0.0
        assert "Ox" not in COMMON_MODIFICATIONS["Oxidation"].synonyms
        assert COMMON_MODIFICATIONS["Oxidation"].diff_mono_mass == OXIDATION_MASS
        assert get_modification("Oxidation") != mod

    def test_unknown_modification(self):
        with pytest.raises(KeyError):
            get_modification("Unobtainium")

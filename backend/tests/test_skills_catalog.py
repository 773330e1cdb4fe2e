import json

from services.skills_catalog import DEFAULT_CATEGORIES, SkillCategory, SkillsCatalog


def test_synonyms_are_symmetric():
    catalog = SkillsCatalog()
    assert catalog.is_equivalent("kubernetes", "k8s")
    assert catalog.is_equivalent("k8s", "kubernetes")
    # Two synonyms of the same key are equivalent to each other
    assert catalog.is_equivalent("k8s", "kube")


def test_equivalence_symmetric_for_every_catalog_pair():
    catalog = SkillsCatalog()
    skills = [s for name in catalog.categories for s in catalog.skills_in_category(name)]
    for a in skills:
        for b in skills:
            assert catalog.is_equivalent(a, b) == catalog.is_equivalent(b, a)


def test_equivalence_is_case_insensitive():
    catalog = SkillsCatalog()
    assert catalog.is_equivalent("JavaScript", "JS")
    assert not catalog.is_equivalent("java", "javascript")


def test_find_synonyms():
    catalog = SkillsCatalog()
    assert catalog.find_synonyms("JS") == ["ecmascript", "javascript"]
    assert catalog.find_synonyms("cobol") == []


def test_category_for():
    catalog = SkillsCatalog()
    assert catalog.category_for("React") == "Web Development"
    assert catalog.category_for("k8s") == "DevOps"
    assert catalog.category_for("underwater basket weaving") is None


def test_skills_in_category_has_no_duplicates():
    catalog = SkillsCatalog()
    skills = catalog.skills_in_category("Databases")
    assert skills[:2] == ["sql", "postgresql"]
    assert "postgres" in skills
    assert len(skills) == len(set(skills))
    assert catalog.skills_in_category("Unknown") == []


def test_first_category_wins():
    catalog = SkillsCatalog([
        SkillCategory(name="First", keywords=["python"]),
        SkillCategory(name="Second", keywords=["python"]),
    ])
    assert catalog.category_for("python") == "First"


def test_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "categories": [{"name": "Finance", "keywords": ["ifrs"], "synonyms": {"ifrs": ["ias"]}}]
    }))
    catalog = SkillsCatalog.from_file(path)
    assert catalog.categories == ["Finance"]
    assert catalog.is_equivalent("ias", "IFRS")


def test_from_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    catalog = SkillsCatalog.from_file(path)
    assert catalog.categories == [c.name for c in DEFAULT_CATEGORIES]

    missing = SkillsCatalog.from_file(tmp_path / "missing.json")
    assert missing.categories == [c.name for c in DEFAULT_CATEGORIES]

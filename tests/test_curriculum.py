"""
Curriculum loading and validation tests.
"""

import pytest

from cpattrainer.classroom import (
    CurriculumError,
    estimate_total_duration,
    load_curriculum,
    parse_curriculum,
    validate_curriculum,
)
from cpattrainer.schemas import SAFETY_GATE_ID, Curriculum, Module

from conftest import MODULE_IDS, make_curriculum


class TestBundledCurriculum:

    def test_six_modules_in_order(self, curriculum):
        assert curriculum.module_ids == MODULE_IDS

    def test_bundled_curriculum_valid(self, curriculum):
        assert validate_curriculum(curriculum) == []

    def test_total_order(self, curriculum):
        # Each module requires the safety gate and every earlier module
        for i, module in enumerate(curriculum.modules):
            assert module.prerequisites[0] == SAFETY_GATE_ID
            assert module.module_prerequisites == MODULE_IDS[:i]

    def test_every_module_has_assessment(self, curriculum):
        for module in curriculum.modules:
            assert module.assessment is not None
            assert module.assessment.questions

    def test_every_module_has_sections(self, curriculum):
        for module in curriculum.modules:
            assert len(module.sections) >= 2
            assert all(section.title and section.content for section in module.sections)
        first = curriculum.get_module(MODULE_IDS[0])
        assert [s.id for s in first.sections] == [
            "what-is-light",
            "therapeutic-wavelengths",
            "terminology-measurements",
        ]

    def test_safety_flags(self, curriculum):
        assert curriculum.get_module("04-safety-protocols").safety_flags == [
            "safety-critical",
            "emergency-procedures",
        ]

    def test_estimated_duration(self, curriculum):
        assert estimate_total_duration(curriculum) == "33 minutes"


class TestValidation:

    def test_valid_linear(self):
        assert validate_curriculum(make_curriculum("a", "b", "c")) == []

    def test_duplicate_id(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1),
            Module(id="a", title="A again", position=2),
        ])
        assert any("Duplicate module id" in e for e in validate_curriculum(curriculum))

    def test_duplicate_position(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1),
            Module(id="b", title="B", position=1),
        ])
        assert any("share position" in e for e in validate_curriculum(curriculum))

    def test_duplicate_section_id(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, sections=[
                {"id": "intro", "title": "Intro"},
                {"id": "intro", "title": "Intro again"},
            ]),
        ])
        assert validate_curriculum(curriculum) == ["Module a has duplicate section id: intro"]

    def test_unknown_prerequisite(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, prerequisites=["ghost"]),
        ])
        assert validate_curriculum(curriculum) == ["Module a has unknown prerequisite: ghost"]

    def test_self_prerequisite(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, prerequisites=["a"]),
        ])
        assert any("itself" in e for e in validate_curriculum(curriculum))

    def test_cycle(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, prerequisites=["b"]),
            Module(id="b", title="B", position=2, prerequisites=["a"]),
        ])
        errors = validate_curriculum(curriculum)
        assert any(e.startswith("Prerequisite cycle") for e in errors)

    def test_prerequisite_after_module(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, prerequisites=["b"]),
            Module(id="b", title="B", position=2),
        ])
        errors = validate_curriculum(curriculum)
        assert any("does not come after" in e for e in errors)

    def test_safety_gate_is_not_unknown(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, prerequisites=[SAFETY_GATE_ID]),
        ])
        assert validate_curriculum(curriculum) == []


class TestParsing:

    def test_sections_parsed(self):
        curriculum = parse_curriculum({"modules": [{
            "id": "a", "title": "A", "position": 1,
            "sections": [{"id": "s1", "title": "One", "content": "Text"}],
        }]})
        assert curriculum.modules[0].sections[0].content == "Text"

    def test_bare_list(self):
        curriculum = parse_curriculum([{"id": "a", "title": "A", "position": 1}])
        assert curriculum.module_ids == ["a"]

    def test_not_a_mapping(self):
        with pytest.raises(CurriculumError):
            parse_curriculum("modules")

    def test_schema_errors_reported(self):
        with pytest.raises(CurriculumError) as exc_info:
            parse_curriculum({"modules": [{"id": "a", "title": "A"}]})
        assert any("position" in e for e in exc_info.value.errors)

    def test_graph_errors_raise(self):
        with pytest.raises(CurriculumError):
            parse_curriculum({"modules": [{"id": "a", "title": "A", "position": 1, "prerequisites": ["x"]}]})


class TestLoading:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_curriculum(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "modules.yaml"
        path.write_text("modules: [unclosed", encoding="utf-8")
        with pytest.raises(CurriculumError):
            load_curriculum(path)

    def test_custom_file(self, tmp_path):
        path = tmp_path / "modules.yaml"
        path.write_text(
            "modules:\n"
            "  - id: intro\n"
            "    title: Intro\n"
            "    position: 1\n"
            "    duration: 10-20 minutes\n"
            "    prerequisites: [safety-acknowledgment]\n"
            "  - id: advanced\n"
            "    title: Advanced\n"
            "    position: 2\n"
            "    duration: 50-60 minutes\n"
            "    prerequisites: [safety-acknowledgment, intro]\n",
            encoding="utf-8",
        )
        curriculum = load_curriculum(path)
        assert curriculum.module_ids == ["intro", "advanced"]
        assert estimate_total_duration(curriculum) == "1h 10m"


class TestDurationEstimate:

    def test_unparseable_durations_ignored(self):
        curriculum = Curriculum(modules=[
            Module(id="a", title="A", position=1, duration="about an hour"),
            Module(id="b", title="B", position=2, duration="3-4 minutes"),
        ])
        assert estimate_total_duration(curriculum) == "4 minutes"

"""
Curriculum loader for CPAT Trainer.

Loads the curriculum graph from a YAML file and checks it:
- Unique module ids and positions, unique section ids within a module
- Prerequisites refer to known modules or the safety gate
- Prerequisites form a DAG (networkx cycle detection)
- Every module comes after its prerequisites
"""

import logging
import re
from pathlib import Path
from typing import Any, Optional

import networkx as nx
import yaml
from pydantic import ValidationError

from cpattrainer.schemas import SAFETY_GATE_ID, Curriculum
from cpattrainer.utils import format_minutes

logger = logging.getLogger(__name__)

DEFAULT_CURRICULUM_PATH = Path(__file__).parent.parent / "data" / "modules.yaml"

DURATION_RANGE = re.compile(r'(\d+)-(\d+)')


class CurriculumError(ValueError):
    """Curriculum file could not be turned into a valid curriculum."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid curriculum: " + "; ".join(errors))


def validate_curriculum(curriculum: Curriculum) -> list[str]:
    """
    Check the curriculum graph.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    seen_ids = set()
    for module in curriculum.modules:
        if module.id in seen_ids:
            errors.append(f"Duplicate module id: {module.id}")
        seen_ids.add(module.id)

    for module in curriculum.modules:
        section_ids = [s.id for s in module.sections]
        for section_id in sorted({s for s in section_ids if section_ids.count(s) > 1}):
            errors.append(f"Module {module.id} has duplicate section id: {section_id}")

    seen_positions = {}
    for module in curriculum.modules:
        if module.position in seen_positions:
            errors.append(
                f"Modules {seen_positions[module.position]} and {module.id} share position {module.position}"
            )
        seen_positions[module.position] = module.id

    G = nx.DiGraph()
    G.add_nodes_from(seen_ids)
    for module in curriculum.modules:
        for prereq in module.prerequisites:
            if prereq == SAFETY_GATE_ID:
                continue
            if prereq == module.id:
                errors.append(f"Module {module.id} lists itself as a prerequisite")
                continue
            if prereq not in seen_ids:
                errors.append(f"Module {module.id} has unknown prerequisite: {prereq}")
                continue
            G.add_edge(prereq, module.id)

    try:
        cycle = nx.find_cycle(G)
        path = " -> ".join([u for u, _ in cycle] + [cycle[0][0]])
        errors.append(f"Prerequisite cycle: {path}")
    except nx.NetworkXNoCycle:
        pass

    positions = {m.id: m.position for m in curriculum.modules}
    for prereq, module_id in G.edges:
        if positions[prereq] >= positions[module_id]:
            errors.append(
                f"Module {module_id} (position {positions[module_id]}) does not come after "
                f"its prerequisite {prereq} (position {positions[prereq]})"
            )

    return errors


def parse_curriculum(data: Any) -> Curriculum:
    """
    Build and validate a curriculum from parsed YAML data.

    Accepts either {"modules": [...]} or a bare list of modules.

    Raises:
        CurriculumError: If the data does not describe a valid curriculum
    """
    if isinstance(data, list):
        data = {"modules": data}
    if not isinstance(data, dict):
        raise CurriculumError(["Curriculum must be a mapping with a 'modules' list"])

    try:
        curriculum = Curriculum.model_validate(data)
    except ValidationError as e:
        raise CurriculumError([
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]) from e

    errors = validate_curriculum(curriculum)
    if errors:
        raise CurriculumError(errors)
    return curriculum


def load_curriculum(path: Optional[Path] = None) -> Curriculum:
    """
    Load the curriculum from YAML.

    Args:
        path: Curriculum file (default: bundled data/modules.yaml)

    Raises:
        FileNotFoundError: If the file doesn't exist
        CurriculumError: If the content is not a valid curriculum
    """
    file_path = Path(path) if path else DEFAULT_CURRICULUM_PATH

    if not file_path.exists():
        raise FileNotFoundError(f"Curriculum not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CurriculumError([f"YAML parse error: {e}"]) from e

    curriculum = parse_curriculum(data)
    logger.debug(f"Loaded {len(curriculum)} modules from {file_path}")
    return curriculum


def estimate_total_duration(curriculum: Curriculum) -> str:
    """
    Estimate the time to finish the whole curriculum.

    Each module contributes the midpoint of its "A-B" duration range;
    durations without a range contribute nothing.
    """
    total_minutes = 0.0
    for module in curriculum.modules:
        match = DURATION_RANGE.search(module.duration)
        if match:
            total_minutes += (int(match.group(1)) + int(match.group(2))) / 2
    return format_minutes(total_minutes)

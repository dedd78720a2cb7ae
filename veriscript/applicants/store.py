"""Profile stores: persistence for applicant profiles and the rubric."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

import yaml

from veriscript.assessment.models import RubricCriterion
from veriscript.assessment.rubric import DEFAULT_RUBRIC, validate_rubric
from .models import WriterProfile

LOG = logging.getLogger(__name__)


class ProfileStore(Protocol):
    """Key-value storage of WriterProfile records keyed by applicant id.

    Writes replace the whole record; the last writer wins.
    """

    def get(self, profile_id: str) -> Optional[WriterProfile]:
        ...

    def get_all(self) -> List[WriterProfile]:
        ...

    def put(self, profile: WriterProfile) -> None:
        ...

    def get_rubric(self) -> List[RubricCriterion]:
        ...

    def put_rubric(self, rubric: Sequence[RubricCriterion]) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryProfileStore:
    """ProfileStore kept in process memory."""

    def __init__(self):
        self._profiles: Dict[str, WriterProfile] = {}
        self._rubric: Optional[List[RubricCriterion]] = None

    def get(self, profile_id: str) -> Optional[WriterProfile]:
        profile = self._profiles.get(profile_id)
        return profile.model_copy(deep=True) if profile else None

    def get_all(self) -> List[WriterProfile]:
        return [p.model_copy(deep=True) for p in self._profiles.values()]

    def put(self, profile: WriterProfile) -> None:
        self._profiles[profile.id] = profile.model_copy(deep=True)

    def get_rubric(self) -> List[RubricCriterion]:
        return list(self._rubric if self._rubric is not None else DEFAULT_RUBRIC)

    def put_rubric(self, rubric: Sequence[RubricCriterion]) -> None:
        self._rubric = validate_rubric(rubric)

    def clear(self) -> None:
        self._profiles.clear()
        self._rubric = None


class YamlProfileStore:
    """ProfileStore persisted to a single YAML file.

    The file holds two top-level keys, ``applicants`` and ``rubric``, using the
    camelCase field names of the models.
    """

    def __init__(self, yaml_path: Path):
        self.yaml_path = Path(yaml_path)

    def _load_yaml(self) -> Dict:
        if self.yaml_path.exists():
            with open(self.yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise TypeError(f"Profile store {self.yaml_path} must contain a mapping")
            return data
        return {"applicants": [], "rubric": None}

    def _save_yaml(self, data: Dict) -> None:
        """Write the whole file, replacing it atomically."""
        self.yaml_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.yaml_path.parent, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
            os.replace(tmp_path, self.yaml_path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, profile_id: str) -> Optional[WriterProfile]:
        for record in self._load_yaml().get("applicants") or []:
            if record.get("id") == profile_id:
                return WriterProfile.model_validate(record)
        return None

    def get_all(self) -> List[WriterProfile]:
        return [WriterProfile.model_validate(r) for r in self._load_yaml().get("applicants") or []]

    def put(self, profile: WriterProfile) -> None:
        data = self._load_yaml()
        applicants = data.get("applicants") or []
        record = profile.model_dump(mode='json', by_alias=True)

        for i, existing in enumerate(applicants):
            if existing.get("id") == profile.id:
                applicants[i] = record
                break
        else:
            applicants.append(record)

        data["applicants"] = applicants
        self._save_yaml(data)
        LOG.debug("Saved profile %s (%s)", profile.id, profile.status.value)

    def get_rubric(self) -> List[RubricCriterion]:
        rubric = self._load_yaml().get("rubric")
        if not rubric:
            return list(DEFAULT_RUBRIC)
        return [RubricCriterion.model_validate(c) for c in rubric]

    def put_rubric(self, rubric: Sequence[RubricCriterion]) -> None:
        criteria = validate_rubric(rubric)
        data = self._load_yaml()
        data["rubric"] = [c.model_dump(mode='json', by_alias=True) for c in criteria]
        self._save_yaml(data)
        LOG.info("Saved rubric with %d criteria", len(criteria))

    def clear(self) -> None:
        if self.yaml_path.exists():
            self.yaml_path.unlink()

"""Parser for importing rubric criteria from markdown documents."""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from .models import RubricCriterion
from .rubric import validate_rubric

# (category, points text, description)
ParsedRow = Tuple[str, str, Optional[str]]


class RubricParser:
    """Parse markdown rubrics into RubricCriterion lists."""

    def parse_file(self, rubric_path: Path) -> List[RubricCriterion]:
        """Parse a rubric markdown file."""
        try:
            content = rubric_path.read_text(encoding='utf-8')
        except OSError as e:
            raise ValueError(f"Could not read rubric file: {e}") from e
        return self.parse(content)

    def parse(self, content: str) -> List[RubricCriterion]:
        """
        Parse markdown content to extract rubric criteria.

        Supports multiple formats:
        1. Tables with | Category | Points | Description |
        2. Bullet lists with - Category (X points): Description
        3. Headers with ## Category (X points) followed by description

        Criteria get sequential ids ("1", "2", ...) in document order.
        """
        for parse_format in (self._parse_table_format,
                             self._parse_list_format,
                             self._parse_header_format):
            rows = parse_format(content)
            if rows:
                return self._to_criteria(rows)

        raise ValueError(
            "Could not parse rubric. Ensure it contains a table with Category|Points|Description "
            "or a bullet list with '- Category (X points): Description' format"
        )

    def _to_criteria(self, rows: List[ParsedRow]) -> List[RubricCriterion]:
        criteria = []
        for i, (category, points_text, description) in enumerate(rows, start=1):
            points = float(points_text)
            if not points.is_integer():
                raise ValueError(f"Rubric points must be whole numbers: {category} has {points_text}")
            criteria.append(RubricCriterion(
                id=str(i),
                category=category,
                description=description or f"Evaluation of {category}",
                max_points=int(points),
            ))
        return validate_rubric(criteria)

    def _parse_table_format(self, content: str) -> List[ParsedRow]:
        """Parse table format rubrics."""
        rows: List[ParsedRow] = []
        in_table = False
        header_indices = {}

        for line in content.split('\n'):
            line = line.strip()

            # Skip empty lines and separators
            if not line or line.startswith('|-') or all(c in '|-: ' for c in line):
                continue

            if '|' not in line:
                continue

            parts = [p.strip() for p in line.split('|')]
            parts = [p for p in parts if p]

            # Detect header row
            if not in_table:
                for i, part in enumerate(parts):
                    part_lower = part.lower()
                    if any(keyword in part_lower for keyword in ['category', 'criterion', 'component']):
                        header_indices['name'] = i
                    elif any(keyword in part_lower for keyword in ['point', 'score', 'max']):
                        header_indices['points'] = i
                    elif any(keyword in part_lower for keyword in ['description', 'criteria', 'requirement']):
                        header_indices['description'] = i

                if 'name' in header_indices and 'points' in header_indices:
                    in_table = True
                continue

            if len(parts) <= max(header_indices['name'], header_indices['points']):
                continue

            points_match = re.search(r'(\d+(?:\.\d+)?)', parts[header_indices['points']])
            if not points_match:
                continue

            name = parts[header_indices['name']].replace('**', '').replace('*', '').strip()
            # Skip total rows
            if name.lower() in ['total', 'sum', 'max', 'maximum']:
                continue

            description = None
            if 'description' in header_indices and header_indices['description'] < len(parts):
                description = parts[header_indices['description']]

            rows.append((name, points_match.group(1), description))

        return rows

    def _parse_list_format(self, content: str) -> List[ParsedRow]:
        """Parse bullet list format rubrics."""
        # Matches: - Category (X points): Description
        # Or: - Category [X pts] - Description
        pattern = r'^\s*[-*]\s+([^(\[\n]+?)\s*[\(\[]?(\d+(?:\.\d+)?)\s*(?:points?|pts?)[\)\]]?\s*[:|-]\s*(.+)$'
        return [
            (match.group(1).strip(), match.group(2), match.group(3).strip())
            for match in re.finditer(pattern, content, re.MULTILINE)
        ]

    def _parse_header_format(self, content: str) -> List[ParsedRow]:
        """Parse header-based format rubrics."""
        rows: List[ParsedRow] = []
        pattern = r'^#{2,3}\s+([^(\[]+?)\s*[\(\[]?(\d+(?:\.\d+)?)\s*(?:points?|pts?)[\)\]]?\s*$'

        lines = content.split('\n')
        for i, line in enumerate(lines):
            match = re.match(pattern, line.strip())
            if not match:
                continue

            # Description is the following non-heading lines
            description = ""
            for j in range(i + 1, min(i + 5, len(lines))):
                next_line = lines[j].strip()
                if next_line.startswith('#'):
                    break
                if next_line:
                    description += next_line + " "

            rows.append((match.group(1).strip(), match.group(2), description.strip() or None))

        return rows
